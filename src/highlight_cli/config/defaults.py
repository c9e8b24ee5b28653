"""Default configuration values."""

DEFAULT_CONFIG_YAML = """
config:
  color: true
  default_color: ""
  word_color: "blue+h"

colors:
  error: "red+b"
  warning: "yellow"
  ok: "green"
  muted: "white+d"

presets:
  log:
    description: "Severity levels in application logs"
    rules:
      - line: "error"
        patterns: ["\\\\b(ERROR|FATAL|CRITICAL)\\\\b"]
      - line: "warning"
        patterns: ["\\\\bWARN(ING)?\\\\b"]
      - line: "muted"
        patterns: ["\\\\b(DEBUG|TRACE)\\\\b"]
      - word: "cyan"
        patterns: ["\\\\d{4}-\\\\d{2}-\\\\d{2}[T ]\\\\d{2}:\\\\d{2}:\\\\d{2}(\\\\.\\\\d+)?"]

  gotest:
    description: "Output of 'go test -v'"
    rules:
      - line: "error"
        patterns: ["^(--- )?FAIL", "^panic:"]
      - line: "ok"
        patterns: ["^(--- )?PASS", "^ok "]
      - word: "yellow+b"
        patterns: ["\\\\S+_test\\\\.go:\\\\d+"]

  pytest:
    description: "Output of 'pytest -v'"
    rules:
      - word: "ok"
        patterns: ["\\\\bPASSED\\\\b"]
      - word: "error"
        patterns: ["\\\\b(FAILED|ERROR)\\\\b"]
      - word: "warning"
        patterns: ["\\\\b(SKIPPED|XFAIL|XPASS)\\\\b"]
"""
