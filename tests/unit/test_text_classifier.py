"""自由記述テキスト分類のテスト"""

import pytest

from locability.features.importing.classifiers.text_classifier import TextClassifier
from locability.features.spots.domain.enums import SpotType


@pytest.fixture
def classifier() -> TextClassifier:
    return TextClassifier()


@pytest.mark.parametrize(
    "text,expected",
    [
        ("There is a lift here", SpotType.ELEVATOR),
        ("Wheelchair ramp at the side door", SpotType.RAMP),
        ("Accessible toilet on the ground floor", SpotType.ACCESSIBLE_TOILET),
        ("Disabled parking space", SpotType.ACCESSIBLE_PARKING),
        ("Step-free path to the station", SpotType.STEP_FREE_ROUTE),
    ],
)
def test_classify_known_descriptions(classifier, text: str, expected: SpotType) -> None:
    """参照語彙に一致するテキストを分類"""
    result = classifier.classify(text)

    assert result.spot_type == expected
    assert result.confidence > 0.3


def test_confidence_of_unambiguous_text(classifier) -> None:
    """1種別のみに一致する場合の確信度は1"""
    result = classifier.classify("elevator")

    assert result.spot_type == SpotType.ELEVATOR
    assert result.confidence == 1.0


@pytest.mark.parametrize("text", ["", "   ", "hello world", "accessible"])
def test_unclassifiable_text(classifier, text: str) -> None:
    """一致しない・確信度が低い場合は種別なし"""
    result = classifier.classify(text)

    assert result.spot_type is None
    assert result.confidence == 0.0
