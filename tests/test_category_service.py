from models.category import Category
from services.category_service import CategoryService


def test_default_categories_have_unique_ids(categories):
    ids = [c.id for c in categories.get_all()]
    assert len(ids) == len(set(ids)) == 19
    assert len(categories.get_by_type("expense")) == 12
    assert len(categories.get_by_type("income")) == 7


def test_lookup_by_name_and_type(categories):
    assert categories.find_by_name("餐饮", "expense").id == "food"
    assert categories.find_by_name("餐饮", "income") is None
    assert categories.resolve_id(" 工资 ", "income") == "salary"
    assert categories.resolve_id("其他", "income") == "other_income"
    assert categories.resolve_id("不存在", "expense") == "other_expense"


def test_unknown_ids_get_placeholders(categories):
    assert categories.get_by_id("nope") is None
    assert categories.name_for("nope") == "未知"
    assert categories.icon_for("nope") == "❓"
    assert categories.name_for("pet") == "宠物"


def test_custom_category_set():
    svc = CategoryService([Category("x", "X", "*", "expense")])
    assert svc.get_all() == [Category("x", "X", "*", "expense")]
    assert svc.resolve_id("Y", "income") == "other_income"
