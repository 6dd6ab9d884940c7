import pytest

from brainstorm.services.errors import StructuralDepthError, XmlParseError
from brainstorm.transcode import decode, encode
from brainstorm.transcode.decode import pre_escape


def test_decode_example_round_trip() -> None:
    text = encode({"problem": "A&B", "goal": "G"})
    assert decode(text) == {"problem": "A&B", "goal": "G"}


def test_round_trip_nested_records_and_lists() -> None:
    value = {
        "problem": "Kids don't eat veggies - at all",
        "roles": [
            {"role": "Chef", "description": "Cooks \"real\" food <fast>"},
            {"role": "Parent", "description": "Has 2 kids & a dog"},
        ],
        "meta": {"tags": ["a", "b", "c"], "note": "’curly’ “quotes”"},
    }
    assert decode(encode(value)) == value


def test_round_trip_is_idempotent() -> None:
    value = {"answer": "R&D -> profit; 'fast' & cheap", "id": "n-1"}
    once = decode(encode(value))
    twice = decode(encode(once))
    assert once == twice == value


def test_repeated_siblings_become_list_and_single_stays_bare() -> None:
    assert decode("<a><b>1</b><b>2</b></a>") == {"a": {"b": ["1", "2"]}}
    assert decode("<a><b>1</b></a>") == {"a": {"b": "1"}}
    assert decode("<a><b>1</b><c>x</c><b>2</b><b>3</b></a>") == {"a": {"b": ["1", "2", "3"], "c": "x"}}


def test_empty_tag_is_absent_not_empty_string() -> None:
    value = decode("<rec><helper></helper><blank>  \n </blank><content>c</content></rec>")
    assert value == {"rec": {"helper": None, "blank": None, "content": "c"}}
    assert "helper" in value["rec"]
    assert "missing" not in value["rec"]


def test_multiple_top_level_siblings_and_stray_prose() -> None:
    text = "Sure! Here you go:\n<thought>t</thought>\n<output><x>1</x></output>\nHope this helps."
    assert decode(text) == {"thought": "t", "output": {"x": "1"}}


def test_unescaped_prose_characters_survive() -> None:
    text = "<content>R&D isn't cheap - it's “worth it” if a < b and c > d</content>"
    assert decode(text) == {"content": "R&D isn't cheap - it's “worth it” if a < b and c > d"}


def test_existing_entities_are_not_double_escaped() -> None:
    assert pre_escape("<a>A&amp;B &#45; &lt;</a>") == "<a>A&amp;B &#45; &lt;</a>"
    assert decode("<a>A&amp;B &#x41; &lt;</a>") == {"a": "A&B A <"}


def test_hyphenated_tag_names_are_left_alone() -> None:
    assert decode("<user-answer>yes-no</user-answer>") == {"user-answer": "yes-no"}


def test_malformed_markup_raises_parse_error_with_text() -> None:
    text = "<output><tree><root>oops</tree></output>"
    with pytest.raises(XmlParseError) as excinfo:
        decode(text)
    assert excinfo.value.text == text
    assert excinfo.value.position is not None
    assert excinfo.value.status_code == 422


def test_plain_text_and_empty_input() -> None:
    assert decode("just words") == "just words"
    assert decode("") is None


def test_normalization_depth_is_bounded() -> None:
    text = "<a>" * 6 + "x" + "</a>" * 6
    assert decode(text, max_depth=6)
    with pytest.raises(StructuralDepthError) as excinfo:
        decode(text, max_depth=5)
    assert excinfo.value.path.startswith("a.a.a")


def test_round_trip_keeps_carriage_returns() -> None:
    value = {"user_answer": "line one\r\nline two", "goal": "a\rb"}
    assert "\r" not in encode(value)
    assert decode(encode(value)) == value
