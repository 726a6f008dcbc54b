"""Overpass要素をスポットに変換するパーサー"""

from typing import Optional

from ....shared.exceptions.errors import ParsingError
from ....shared.logging.config import get_logger
from ....shared.utils.text import normalize_text
from ...geo.domain.models import Coordinate
from ...spots.domain.enums import SpotStatus
from ...spots.domain.models import AccessibilitySpot
from ..classifiers.tag_classifier import TagClassifier
from ..domain.models import RawElement

logger = get_logger(__name__)

DEFAULT_DESCRIPTION = "Accessibility feature from OpenStreetMap"


class OverpassParser:
    """タグ付き要素を AccessibilitySpot に変換する"""

    def __init__(self, classifier: Optional[TagClassifier] = None) -> None:
        """
        Args:
            classifier: タグ分類器（Noneの場合は既定ルール）
        """
        self.classifier = classifier or TagClassifier()
        self.malformed_count = 0

    def parse(self, elements: list[RawElement]) -> list[AccessibilitySpot]:
        """
        要素のリストをスポットに変換

        座標・タグが欠けた要素はスキップする（他の要素の処理は続行）。

        Args:
            elements: タグ付き要素

        Returns:
            list[AccessibilitySpot]: 変換できたスポット（入力順）
        """
        self.malformed_count = 0
        spots = []

        for element in elements:
            try:
                spots.append(self.parse_element(element))
            except ParsingError as e:
                self.malformed_count += 1
                logger.debug(f"Skipping element {element.element_id}: {e}")

        if self.malformed_count:
            logger.warning(f"Skipped {self.malformed_count} malformed Overpass elements")

        return spots

    def parse_element(self, element: RawElement) -> AccessibilitySpot:
        """
        1件の要素をスポットに変換

        取り込んだスポットは稼働状況の情報を持たないため常に Working とする。

        Raises:
            ParsingError: 座標・タグが欠けている場合
        """
        if element.latitude is None or element.longitude is None:
            raise ParsingError("Element has no coordinate")
        if element.tags is None:
            raise ParsingError("Element has no tags")

        try:
            coordinate = Coordinate(float(element.latitude), float(element.longitude))
        except (TypeError, ValueError) as e:
            raise ParsingError(f"Invalid coordinate: {e}") from e

        spot_type, title = self.classifier.classify(element.tags)
        description = (
            normalize_text(element.tags.get("description"))
            or normalize_text(element.tags.get("note"))
            or DEFAULT_DESCRIPTION
        )

        return AccessibilitySpot(
            title=title,
            description=description,
            type=spot_type,
            status=SpotStatus.WORKING,
            coordinate=coordinate,
        )
