"""
Application constants for the CRM API.

Contains order statuses, cash operation types and pagination defaults.
"""

# =============================================================================
# Order Statuses
# =============================================================================

STATUS_WAITING = "Ожидает"
STATUS_ACCEPTED = "Принял"
STATUS_IN_PROGRESS = "В работе"
STATUS_MODERN = "Модерн"
STATUS_DONE = "Готово"
STATUS_REFUSED = "Отказ"
STATUS_NOT_ORDERED = "Незаказ"

# Sort priority for order listings; unknown statuses go last
ORDER_STATUS_PRIORITY = {
    STATUS_WAITING: 1,
    STATUS_ACCEPTED: 2,
    STATUS_IN_PROGRESS: 3,
    STATUS_MODERN: 4,
    STATUS_DONE: 5,
    STATUS_REFUSED: 6,
    STATUS_NOT_ORDERED: 7,
}
UNKNOWN_STATUS_PRIORITY = 999

FINAL_ORDER_STATUSES = frozenset({STATUS_DONE, STATUS_REFUSED, STATUS_NOT_ORDERED})
ACTIVE_ORDER_STATUSES = frozenset({STATUS_WAITING, STATUS_ACCEPTED, STATUS_IN_PROGRESS, STATUS_MODERN})

# =============================================================================
# Masters
# =============================================================================

MASTER_STATUS_WORKING = "работает"

# =============================================================================
# Cash Operations
# =============================================================================

CASH_INCOME = "приход"
CASH_EXPENSE = "расход"
CASH_OPERATION_TYPES = (CASH_INCOME, CASH_EXPENSE)

# Creator recorded on income generated when an order is closed
SYSTEM_CREATOR = "Система"

# =============================================================================
# Pagination
# =============================================================================

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# "all" in a filter query parameter means no filter
FILTER_ALL = "all"

# =============================================================================
# Reports
# =============================================================================

# City label for cash operations recorded without a city
UNKNOWN_CITY = "Неизвестно"

# =============================================================================
# Directors
# =============================================================================

PASSWORD_HASH_ROUNDS = 12
