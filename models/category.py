from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    icon: str
    type: str           # 'income' | 'expense'
    color: str = "#6b7280"
