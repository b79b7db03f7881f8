import json

from kiops.dts_model import (
    Address,
    Node,
    NodeName,
    Path,
    Prop,
    Value,
    ValueKind,
    format_delimited,
)


def test_address_display_is_hex():
    assert str(Address(255)) == "0xff"


def test_node_name_display():
    assert str(NodeName.symbol("uart")) == "uart"
    assert str(NodeName.symbol("uart", Address(16))) == f"uart@{Address(16)}"
    assert str(NodeName.reference("lbl")) == "&lbl"


def test_node_name_predicates():
    assert NodeName.symbol("").is_root()
    assert not NodeName.symbol("", Address(0)).is_root()
    assert NodeName.reference("x").is_reference()
    assert not NodeName.symbol("x").is_reference()


def test_node_name_ordering():
    sym = NodeName.symbol("z")
    ref = NodeName.reference("a")
    with_addr = NodeName.symbol("z", Address(1))
    assert sorted([ref, with_addr, sym]) == [sym, with_addr, ref]


def test_node_name_json():
    assert NodeName.symbol("a").to_json() == {"Symbol": ["a", None]}
    assert NodeName.symbol("a", Address(3)).to_json() == {"Symbol": ["a", 3]}
    assert NodeName.reference("b").to_json() == {"Reference": "b"}


def test_root_path():
    root = Path.root()
    assert root.is_root()
    assert str(root) == "/"
    assert len(root) == 1
    assert not root.is_reference()


def test_join_from_root():
    path = Path.root().join([NodeName.symbol("a"), NodeName.symbol("b")])
    assert len(path) == 3
    assert str(path) == "/a/b"
    assert not path.is_root()


def test_join_reference_restarts():
    path = Path.root().join(
        [NodeName.symbol("a"), NodeName.reference("x"), NodeName.symbol("b")]
    )
    assert path.names == (NodeName.reference("x"), NodeName.symbol("b"))
    assert path.is_reference()
    assert path == Path.reference("x").join([NodeName.symbol("b")])


def test_join_root_restarts():
    path = Path.reference("x").join([NodeName.symbol(""), NodeName.symbol("c")])
    assert path == Path.root().join([NodeName.symbol("c")])


def test_parent():
    root = Path.root()
    child = root.join([NodeName.symbol("a")])
    assert child.parent() == root
    assert root.parent() == root


def test_split():
    first, rest = Path.reference("x").join([NodeName.symbol("y")]).split()
    assert first == NodeName.reference("x")
    assert rest == (NodeName.symbol("y"),)
    empty_first, empty_rest = Path().split()
    assert empty_first.is_root()
    assert empty_rest == ()


def test_path_ordering_prefix_first():
    root = Path.root()
    child = root.join([NodeName.symbol("a")])
    ref = Path.reference("a")
    assert sorted([ref, child, root]) == [root, child, ref]


def test_path_hashable():
    paths = {Path.root(), Path.root(), Path.reference("a")}
    assert len(paths) == 2


def test_format_delimited():
    assert format_delimited(["a", "b"], "<", " ", ">") == "<a b>"
    assert format_delimited([], "(", ", ", ")") == "()"


def test_value_display():
    sym = Value(ValueKind.SYMBOL, "b")
    addr = Value(ValueKind.ADDRESS, Address(12))
    assert str(sym) == "b"
    assert str(Value(ValueKind.REFERENCE, "aic")) == "&aic"
    assert str(Value(ValueKind.TEXT, "hi")) == '"hi"'
    assert str(Value(ValueKind.ARRAY, [sym, addr])) == f"<{sym} {addr}>"
    assert str(Value(ValueKind.EXPR, ["A", "B"])) == format_delimited(["A", "B"], "(", ", ", ")")


def test_prop_display():
    sym = Value(ValueKind.SYMBOL, "b")
    addr = Value(ValueKind.ADDRESS, Address(12))
    assert str(Prop("a")) == "a = true"
    assert str(Prop("a", [sym])) == f"a = {sym}"
    assert str(Prop("a", [sym, addr])) == f"a = [{sym}, {addr}]"


def test_prop_json_and_equality():
    prop = Prop("a", [Value(ValueKind.ADDRESS, Address(12))])
    assert prop == Prop("a", (Value(ValueKind.ADDRESS, Address(12)),))
    assert prop.to_json() == {"name": "a", "value": [{"Address": 12}]}


def test_node_json_serialisable():
    child = Node(NodeName.symbol("c", Address(1)))
    node = Node(
        NodeName.symbol(""),
        labels=["top"],
        props=[Prop("p", [Value(ValueKind.ARRAY, [Value(ValueKind.REFERENCE, "r")])])],
        nodes=[child],
    )
    data = node.to_json()
    assert list(data) == ["labels", "name", "props", "nodes"]
    assert data["nodes"] == [child.to_json()]
    assert json.loads(json.dumps(data)) == data