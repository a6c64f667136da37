from aiview.types import BlockType, RawItem, ResponseBlock
from aiview.validate import parse_block, validate_items


def test_code_item_kept_and_unknown_type_dropped():
    items = [{"type": "code", "content": "print(1)"}, {"type": "note", "content": "x"}]
    assert validate_items(items) == [ResponseBlock(type=BlockType.CODE, content="print(1)")]


def test_text_item_passes_through_unchanged():
    blocks = validate_items([{"type": "text", "content": "**Hello** world"}])
    assert len(blocks) == 1
    assert blocks[0].type is BlockType.TEXT
    assert blocks[0].content == "**Hello** world"


def test_tags_are_case_sensitive_and_not_coerced():
    items = [
        {"type": "Code", "content": "a"},
        {"type": "TEXT", "content": "b"},
        {"type": " text", "content": "c"},
        {"type": BlockType.CODE, "content": "d"},
        {"type": 1, "content": "e"},
        {"content": "f"},
    ]
    assert validate_items(items) == []


def test_order_preserved_across_dropped_items():
    items = [
        {"type": "text", "content": "first"},
        {"type": "image", "content": "skip"},
        {"type": "code", "content": "second"},
        {"type": None, "content": "skip"},
        {"type": "note", "content": "skip"},
        {"type": "text", "content": "third"},
        {"type": "text", "content": "third"},
    ]
    blocks = validate_items(items)
    assert [block.content for block in blocks] == ["first", "second", "third", "third"]
    assert len(blocks) == sum(1 for item in items if item["type"] in ("code", "text"))


def test_malformed_content_passed_through():
    blocks = validate_items([{"type": "code"}, {"type": "text", "content": {"nested": [1, 2]}}])
    assert blocks[0].content is None
    assert blocks[1].content == {"nested": [1, 2]}


def test_never_fails_on_garbage():
    assert validate_items(None) == []
    assert validate_items(42) == []
    assert validate_items("code") == []
    assert validate_items({"type": "code", "content": "x"}) == []
    assert validate_items([None, 3, "text", ["code", "x"]]) == []


def test_attribute_style_items_are_accepted():
    assert parse_block(RawItem(type="code", content="ls")) == ResponseBlock(
        type=BlockType.CODE, content="ls"
    )
