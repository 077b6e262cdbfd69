import pytest

from ouramind.errors import ValidationFailed
from ouramind.services.emotion_selector import select_dominant


def test_top_two_above_threshold():
    scores = {"joy": 0.9, "sadness": 0.5, "anger": 0.1}
    assert select_dominant(scores, threshold=0.3, limit=2) == [("joy", 0.9), ("sadness", 0.5)]


def test_nothing_above_threshold_is_empty_not_error():
    scores = {"joy": 0.1, "sadness": 0.2, "anger": 0.29}
    assert select_dominant(scores) == []


def test_threshold_is_inclusive():
    assert select_dominant({"fear": 0.3}) == [("fear", 0.3)]


def test_filter_happens_before_truncation():
    scores = {"joy": 0.2, "sadness": 0.35, "anger": 0.1, "fear": 0.1, "disgust": 0.1}
    assert select_dominant(scores, limit=2) == [("sadness", 0.35)]


def test_ties_follow_catalog_order_regardless_of_input_order():
    scores = {"disgust": 0.6, "fear": 0.6, "anger": 0.6, "sadness": 0.1, "joy": 0.6}
    assert select_dominant(scores, limit=3) == [("joy", 0.6), ("anger", 0.6), ("fear", 0.6)]


def test_unknown_names_tie_after_catalog():
    scores = {"surprise": 0.7, "joy": 0.7}
    assert select_dominant(scores) == [("joy", 0.7), ("surprise", 0.7)]


def test_limit_zero_selects_nothing():
    assert select_dominant({"joy": 0.9}, limit=0) == []


@pytest.mark.parametrize("threshold,limit", [(-0.1, 2), (1.1, 2), (0.3, -1)])
def test_invalid_policy_rejected(threshold, limit):
    with pytest.raises(ValidationFailed):
        select_dominant({"joy": 0.9}, threshold=threshold, limit=limit)
