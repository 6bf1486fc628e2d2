import pytest

from gamedice.types.core import DieRoll, GeneratorKind, face_in_range, parse_decimal


@pytest.mark.parametrize(
    "name, kind",
    [
        ("bbs", GeneratorKind.BBS),
        ("Blum", GeneratorKind.BBS),
        ("ISAAC", GeneratorKind.ISAAC),
        ("md5", GeneratorKind.MD5),
        ("mt", GeneratorKind.MERSENNE),
        (" Mersenne ", GeneratorKind.MERSENNE),
        ("manual", GeneratorKind.MANUAL),
        ("random.org", GeneratorKind.RANDOM_ORG),
        ("network", GeneratorKind.RANDOM_ORG),
        ("replay", GeneratorKind.FILE),
        (GeneratorKind.FILE, GeneratorKind.FILE),
    ],
)
def test_parse_kind(name, kind: GeneratorKind):
    assert GeneratorKind.parse(name) is kind


def test_unknown_kind():
    with pytest.raises(ValueError):
        GeneratorKind.parse("lava-lamp")


def test_every_kind_is_described():
    for kind in GeneratorKind:
        assert kind.display_name
        assert kind.description
    assert GeneratorKind.MERSENNE.display_name == "Mersenne Twister"


def test_seedable_kinds():
    assert {k for k in GeneratorKind if not k.seedable} == {
        GeneratorKind.MANUAL,
        GeneratorKind.RANDOM_ORG,
    }


def test_die_roll():
    roll = DieRoll(5, 2)
    first, second = roll
    assert (first, second) == roll.as_tuple() == (5, 2)
    assert DieRoll(3, 3) == DieRoll(3, 3)
    with pytest.raises(AttributeError):
        roll.first = 6  # type: ignore[misc]


@pytest.mark.parametrize("first, second", [(0, 1), (1, 7), (-1, 3)])
def test_die_roll_rejects_bad_faces(first: int, second: int):
    with pytest.raises(ValueError):
        DieRoll(first, second)


def test_die_roll_rejects_non_ints():
    with pytest.raises(TypeError):
        DieRoll(True, 2)
    with pytest.raises(TypeError):
        DieRoll(1.0, 2)


def test_face_in_range():
    assert [v for v in range(-1, 9) if face_in_range(v)] == [1, 2, 3, 4, 5, 6]


def test_parse_decimal():
    assert parse_decimal(" 42\n") == 42
    assert parse_decimal("-17") == -17
    assert parse_decimal("0007") == 7
    assert parse_decimal(str(2**200)) == 2**200


@pytest.mark.parametrize("text", ["", "-", "+7", "1_000", "0x10", "1e3", "4 2", "١٢"])
def test_parse_decimal_rejects(text: str):
    with pytest.raises(ValueError):
        parse_decimal(text)
