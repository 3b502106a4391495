import os

PROMPT = os.getenv("WSH_PROMPT", "wsh> ")

# Giới hạn số lệnh lưu trong history lúc khởi động
try:
    MAX_HISTORY = max(0, int(os.getenv("WSH_HISTORY_SIZE", "5")))
except ValueError:
    MAX_HISTORY = 5

PIPE_SEPARATOR = "|"
DETACH_MARKER = "&"
SUBSTITUTION_MARKER = "$"

BUILTIN_NAMES = ("exit", "cd", "history", "export", "local", "vars")

# Exit status của stage không khởi động được chương trình
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126

LOG_LEVEL = os.getenv("WSH_LOG_LEVEL", "WARNING").upper()
