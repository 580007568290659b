from dataclasses import dataclass, field

from models.transaction import Transaction


@dataclass
class MonthSummary:
    income: float = 0.0
    expense: float = 0.0
    count: int = 0

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass
class CategoryStats:
    category_id: str
    category_name: str
    icon: str
    color: str
    amount: float
    percentage: float
    count: int


@dataclass
class MonthlyStats:
    month: str          # short label, e.g. '3月'
    period: str         # 'YYYY-MM'
    income: float = 0.0
    expense: float = 0.0

    @property
    def balance(self) -> float:
        return self.income - self.expense


@dataclass
class DayGroup:
    date: str           # 'YYYY-MM-DD'
    label: str          # '今天' / '昨天' / '1月15日 星期一'
    transactions: list[Transaction] = field(default_factory=list)
    income: float = 0.0
    expense: float = 0.0
