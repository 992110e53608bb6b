"""
classifier.py - 토큰 분류기
원시 토큰 -> 발현 형질(Visual) / 보인자(Het) 판정 및 표시 형식 정규화
"""

import logging
import math
import re
from typing import Iterable, List, Optional

from .gene_library import GeneDictionary, get_default_dictionary
from .models import CATEGORY_WEIGHT, ClassifiedTokens, GeneCategory, GeneToken, TokenKind
from .segmenter import QUALIFIER_DISPLAY, TokenSegmenter

logger = logging.getLogger(__name__)


# 한정어 -> 보인자 확률
QUALIFIER_PROBABILITY = {
    'Possible': 0.5,
    'Probable': 0.66,
    'Maybe': 0.33,
}

_QUALIFIER = r"possiable|possible|posible|probable|maybe|poss|pos|ph"

_HAS_QUALIFIER = re.compile(r"(?:^|\s)(?:" + _QUALIFIER + r")(?:\s|$)", re.IGNORECASE)
_HAS_PERCENT = re.compile(r"\d{1,3}(?:\.\d+)?\s*%")
_LEADING_PERCENT = re.compile(r"^(\d{1,3}(?:\.\d+)?)\s*%\s*(.*)$")
_LEADING_QUALIFIER = re.compile(r"^(" + _QUALIFIER + r")\b\s*(.*)$", re.IGNORECASE)
_QUALIFIER_ONLY = re.compile(_QUALIFIER, re.IGNORECASE)
_LEADING_HET = re.compile(r"^het(?![a-z])\s*", re.IGNORECASE)
_ANY_HET_WORD = re.compile(r"\bhet\b", re.IGNORECASE)
_SUPER_WORD = re.compile(r"^super[\s-]+(.+)$", re.IGNORECASE)
_SUPER_CAMEL = re.compile(r"^Super([A-Z].*)$")


def _squash(text) -> str:
    return " ".join(str(text or "").split())


def title_case_gene(phrase: str) -> str:
    """
    모르는 유전자 이름 표기 정리
    2글자 이하 단어는 대문자, 전부 대문자인 단어는 유지, 나머지는 첫 글자만 대문자
    """
    words = []
    for word in _squash(phrase).split(" "):
        if not word:
            continue
        if len(word) <= 2:
            words.append(word.upper())
        elif word.isupper():
            words.append(word)
        else:
            words.append(word[0].upper() + word[1:].lower())
    return " ".join(words)


def parse_percent(raw) -> Optional[float]:
    """백분율 숫자 -> 0~1 확률 (음수는 0, 100 초과는 1, 숫자가 아니면 None)"""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return max(0.0, min(1.0, value / 100))


def unique_gene_tokens(tokens: Iterable[str]) -> List[str]:
    """대소문자/공백 무시 중복 제거 (먼저 나온 토큰 유지)"""
    seen = set()
    result = []
    for token in tokens:
        key = _squash(token).lower()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(token)
    return result


class DescriptorClassifier:
    """Visual / Het 판정 및 정규화"""

    def __init__(
        self,
        dictionary: Optional[GeneDictionary] = None,
        segmenter: Optional[TokenSegmenter] = None
    ):
        self.dictionary = dictionary or get_default_dictionary()
        self.segmenter = segmenter or TokenSegmenter(self.dictionary)

    # --------------------------------------------------------
    # 판정
    # --------------------------------------------------------
    def is_het_descriptor(self, token) -> bool:
        """'het' 포함, 앞쪽 한정어(possible/probable/maybe/ph), 'NN%' 중 하나라도 있으면 보인자"""
        text = _squash(token)
        if not text:
            return False
        match = _SUPER_WORD.match(text) or _SUPER_CAMEL.match(text)
        if self._is_het_named_gene(match.group(1) if match else text):
            return False
        lower = text.lower()
        if "het" in lower:
            return True
        if _HAS_QUALIFIER.search(lower):
            return True
        return bool(_HAS_PERCENT.search(lower))

    def _is_het_named_gene(self, text: str) -> bool:
        """'Het Daddy' 등 이름 자체가 'Het'으로 시작하는 유전자"""
        canonical = self.dictionary.lookup_canonical(text)
        return bool(canonical and canonical.lower().startswith("het "))

    def canonical_gene(self, phrase: str, title_case: bool = False) -> str:
        """사전 표준 이름 (없으면 입력 그대로 또는 제목형)"""
        phrase = _squash(phrase)
        canonical = self.dictionary.lookup_canonical(phrase)
        if canonical:
            return canonical
        return title_case_gene(phrase) if title_case else phrase

    def parse_het(self, token) -> Optional[GeneToken]:
        """
        보인자 토큰 해석

        '[NN%] [possible|probable|maybe|ph] [het] <gene>'
        명시된 백분율이 한정어보다 우선하며, 둘 다 없으면 확정 보인자(1.0)
        """
        original = _squash(token)
        if not original:
            return None
        working = original
        probability = None
        percent = None
        qualifier = None

        match = _LEADING_PERCENT.match(working)
        if match:
            probability = parse_percent(match.group(1))
            # 100% 초과로 잘린 값은 확정 보인자로 보고 백분율 표기를 버린다
            if probability is not None and float(match.group(1)) <= 100:
                percent = f"{match.group(1)}%"
            working = match.group(2).strip()

        match = _LEADING_QUALIFIER.match(working)
        if match and (match.group(2) or "").strip():
            qualifier = QUALIFIER_DISPLAY.get(match.group(1).lower())
            working = match.group(2).strip()

        if not self._is_het_named_gene(working):
            working = _LEADING_HET.sub("", working).strip()
            if not self.dictionary.lookup_canonical(working):
                working = _squash(_ANY_HET_WORD.sub("", working))
        if not working or _QUALIFIER_ONLY.fullmatch(working):
            return None

        if probability is None:
            probability = QUALIFIER_PROBABILITY.get(qualifier, 1.0)

        return GeneToken(
            original=original,
            canonical_gene=self.canonical_gene(working, title_case=True),
            kind=TokenKind.HET,
            probability=probability,
            percent=percent,
            qualifier=qualifier,
        )

    def parse_visual(self, token) -> Optional[GeneToken]:
        """발현 형질 토큰 해석 ('Super Pastel', 'SuperPastel' -> is_super)"""
        original = _squash(token)
        if not original:
            return None
        working = original
        is_super = False

        match = _SUPER_WORD.match(working) or _SUPER_CAMEL.match(working)
        if match and match.group(1).strip():
            is_super = True
            working = match.group(1).strip()

        return GeneToken(
            original=original,
            canonical_gene=self.canonical_gene(working),
            kind=TokenKind.VISUAL,
            is_super=is_super,
        )

    def parse_token(self, token) -> Optional[GeneToken]:
        if self.is_het_descriptor(token):
            return self.parse_het(token)
        return self.parse_visual(token)

    # --------------------------------------------------------
    # 목록 단위
    # --------------------------------------------------------
    def classify(self, tokens: Iterable[str]) -> ClassifiedTokens:
        """원시 토큰 목록 -> {visual, het} (레코드 저장 형식)"""
        result = ClassifiedTokens()
        for token in tokens or []:
            parsed = self.parse_token(token)
            if parsed is None:
                logger.debug("Dropped empty trait token: %r", token)
                continue
            if parsed.kind == TokenKind.HET:
                result.het.append(parsed.record_form)
            else:
                result.visual.append(parsed.record_form)
        return result

    def split_input(self, text) -> ClassifiedTokens:
        """자유 입력 문자열 -> {visual, het}"""
        return self.classify(self.segmenter.segment(text))

    def format_het_for_display(self, het) -> Optional[str]:
        """레코드 형식 보인자 -> 'NN% Possible Het Gene'"""
        parsed = self.parse_het(het)
        return parsed.display_form if parsed else None

    def format_tokens(self, visual: Iterable[str], het: Iterable[str]) -> str:
        """발현 형질 + 보인자 목록 -> 편집용 문자열 ('Clown, Pastel, Het Hypo')"""
        parts = [_squash(v) for v in visual or [] if _squash(v)]
        for token in het or []:
            display = self.format_het_for_display(token)
            if display:
                parts.append(display)
        return ", ".join(parts)

    def display_tokens(self, visual: Iterable[str], het: Iterable[str]) -> List[str]:
        """
        표시용 토큰 목록
        중복 제거 후 유전 방식 가중치(우성 < 불완전 우성 < 열성 < 기타) 순, 동률은 입력 순
        """
        combined = [_squash(v) for v in visual or [] if _squash(v)]
        combined.extend(
            display for display in (self.format_het_for_display(h) for h in het or [])
            if display
        )
        combined = unique_gene_tokens(combined)
        weighted = [
            (CATEGORY_WEIGHT.get(self.dictionary.category_of(token), CATEGORY_WEIGHT[GeneCategory.OTHER]), index, token)
            for index, token in enumerate(combined)
        ]
        weighted.sort(key=lambda item: (item[0], item[1]))
        return [token for _, _, token in weighted]
