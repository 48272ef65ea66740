# Константы для инструментов проекта

# Лимиты вывода
MAX_RESPONSE_LEN = 16000
TRUNCATED_MESSAGE = (
    "<response clipped><NOTE>To save on context only part of this file has been shown to you. "
    "Use `view` with `view_range` to see the rest.</NOTE>"
)

# Количество строк контекста вокруг правки
SNIPPET_LINES = 4
