"""
segmenter.py - 형질 문자열 분할기
자유 입력 문자열 -> 유전자 이름 토큰 목록 (입력 순서 유지)

1. 구분자(, ; | / + 줄바꿈)로 나눈 뒤
2. het 구문 / 백분율 구문을 먼저 차지하고
3. 남은 단어는 사전 최장 일치, 실패 시 붙여쓴 문자열 분할(압축 모드)
"""

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .gene_library import GeneDictionary, compact_key, get_default_dictionary

logger = logging.getLogger(__name__)


SEGMENT_DELIMITERS = re.compile(r"[,;|/+\r\n]+")

QUALIFIER_WORDS = r"possiable|possible|posible|probable|maybe|poss|pos|ph"

QUALIFIER_DISPLAY = {
    'possiable': 'Possible',
    'possible': 'Possible',
    'posible': 'Possible',
    'poss': 'Possible',
    'pos': 'Possible',
    'ph': 'Possible',
    'probable': 'Probable',
    'maybe': 'Maybe',
}

_PERCENT = r"(?:(?<![\d.])(?P<pct>\d{1,3}(?:\.\d+)?)\s*%\s*)"
_GENE_TAIL = r"(?P<gene>[A-Za-z0-9(][^\s%]*(?:[ \t]+[A-Za-z0-9(][^\s%]*)*)"

# [NN%] [qualifier] het <gene>
HET_PHRASE = re.compile(
    _PERCENT + r"?"
    r"(?:(?<![A-Za-z])(?P<qual>(?i:" + QUALIFIER_WORDS + r"))\s*|(?<![A-Za-z]))"
    r"(?P<het>(?i:het))(?![a-z])\s*" + _GENE_TAIL
)

# [NN%] qualifier <gene>  ('het' 생략)
QUALIFIER_PHRASE = re.compile(
    _PERCENT + r"?"
    r"(?<![A-Za-z])(?P<qual>(?i:" + QUALIFIER_WORDS + r"))\s+" + _GENE_TAIL
)

# NN% <gene>
PERCENT_PHRASE = re.compile(_PERCENT + _GENE_TAIL)

_WORD = re.compile(r"\S+")
_PLAIN_WORD = re.compile(r"[A-Za-z0-9]+")


@dataclass
class Word:
    text: str
    start: int
    end: int


@dataclass
class Span:
    """원문에서 차지한 구간과 그 구간이 만든 토큰"""
    start: int
    end: int
    token: str


class CompactTiler:
    """
    붙여쓴 문자열 분할 (예: 'PastelMojaveClown' -> Pastel, Mojave, Clown)

    시작 위치별 표(table[i])에 compact[i:]를 사전 압축 키로 빈틈없이 덮는
    최소 토큰 분할을 뒤에서부터 채운다. 한 단계에서 시도하는 접두어 길이는
    사전의 가장 긴 압축 키 길이로 제한된다. 각 칸은 (토큰 수, 다음 위치,
    표준 이름) 하나만 가지며, 덮을 수 없으면 None.
    """

    def __init__(self, dictionary: GeneDictionary):
        self.dictionary = dictionary

    def build_table(self, compact: str) -> List[Optional[Tuple[int, int, str]]]:
        n = len(compact)
        max_len = self.dictionary.longest_compact_length
        table: List[Optional[Tuple[int, int, str]]] = [None] * (n + 1)
        table[n] = (0, n, "")

        for i in range(n - 1, -1, -1):
            best: Optional[Tuple[int, int, str]] = None
            # 긴 접두어 우선 (동률이면 먼저 찾은 분할 유지)
            for j in range(min(n, i + max_len), i, -1):
                rest = table[j]
                if rest is None:
                    continue
                name = self.dictionary.lookup_compact(compact[i:j])
                if name is None:
                    continue
                if best is None or rest[0] + 1 < best[0]:
                    best = (rest[0] + 1, j, name)
            table[i] = best
        return table

    def tile(self, fragment: str) -> Optional[List[Tuple[str, str]]]:
        """
        전체를 덮는 분할 중 토큰 수가 가장 적은 것
        (압축 키, 표준 이름) 목록, 분할 불가면 None
        """
        compact = compact_key(fragment)
        if not compact:
            return None
        table = self.build_table(compact)
        if table[0] is None:
            return None
        tiles: List[Tuple[str, str]] = []
        i = 0
        while i < len(compact):
            _, j, name = table[i]
            tiles.append((compact[i:j], name))
            i = j
        return tiles


class TokenSegmenter:
    """
    형질 문자열 -> 원시 토큰 목록

    het 구문은 '[NN%] [Possible|Probable|Maybe] Het <Gene>' 형태로,
    사전 일치 토큰은 표준 이름('Super <Gene>' 포함)으로,
    나머지는 입력 단어 그대로 돌려준다.
    """

    def __init__(self, dictionary: Optional[GeneDictionary] = None):
        self.dictionary = dictionary or get_default_dictionary()
        self.tiler = CompactTiler(self.dictionary)

    def segment(self, text) -> List[str]:
        if text is None:
            return []
        tokens: List[str] = []
        for segment in SEGMENT_DELIMITERS.split(str(text)):
            if segment.strip():
                tokens.extend(span.token for span in self.segment_spans(segment))
        return tokens

    def segment_spans(self, segment: str) -> List[Span]:
        """구분자가 없는 한 조각을 구간 목록으로 분할 (시작 위치 순)"""
        spans: List[Span] = []
        masked = segment

        for pattern in (HET_PHRASE, QUALIFIER_PHRASE, PERCENT_PHRASE):
            found, masked = self._claim_phrases(pattern, masked)
            spans.extend(found)

        spans.extend(self._match_leftover_words(masked, spans))
        spans.sort(key=lambda s: s.start)
        return spans

    # --------------------------------------------------------
    # het / 백분율 구문
    # --------------------------------------------------------
    def _claim_phrases(self, pattern, masked: str) -> Tuple[List[Span], str]:
        spans = []
        pos = 0
        while True:
            match = pattern.search(masked, pos)
            if not match:
                break

            groups = match.groupdict()
            if groups.get('het') and not groups.get('pct') and not groups.get('qual'):
                # 'Het Daddy'처럼 이름 자체가 'Het'으로 시작하는 유전자
                whole = self._match_run(self._words(masked, match.start('het'), len(masked)), 0)
                if whole and whole[0].lower().startswith("het "):
                    pos = match.end('het')
                    continue

            gene, end = self._resolve_gene(masked, match.start('gene'), match.end('gene'))
            token = self._format_het(groups.get('pct'), groups.get('qual'), gene)
            spans.append(Span(match.start(), end, token))
            masked = masked[:match.start()] + " " * (end - match.start()) + masked[end:]
            pos = end
        return spans, masked

    def _resolve_gene(self, text: str, start: int, end: int) -> Tuple[str, int]:
        """het 표시 뒤의 단어들 중 유전자 이름에 해당하는 부분과 끝 위치"""
        words = self._words(text, start, end)
        run = self._match_run(words, 0)
        if run:
            name, count = run
            return name, words[count - 1].end

        first = words[0]
        if _PLAIN_WORD.fullmatch(first.text):
            tiles = self.tiler.tile(first.text)
            if tiles and len(tiles) > 1:
                key, name = tiles[0]
                return name, first.start + len(key)
        return first.text, first.end

    @staticmethod
    def _format_het(pct: Optional[str], qual: Optional[str], gene: str) -> str:
        parts = []
        if pct:
            parts.append(f"{pct}%")
        if qual:
            parts.append(QUALIFIER_DISPLAY.get(qual.lower(), qual.capitalize()))
        parts.extend(["Het", gene])
        return " ".join(parts)

    # --------------------------------------------------------
    # 남은 단어 (사전 최장 일치 -> 압축 분할 -> 원문)
    # --------------------------------------------------------
    def _match_leftover_words(self, masked: str, claimed: List[Span]) -> List[Span]:
        spans = []
        # 차지된 구간을 사이에 둔 단어끼리는 잇지 않는다
        cursor = 0
        for span in sorted(claimed, key=lambda s: s.start):
            if span.start > cursor:
                spans.extend(self._match_words(self._words(masked, cursor, span.start)))
            cursor = max(cursor, span.end)
        if cursor < len(masked):
            spans.extend(self._match_words(self._words(masked, cursor, len(masked))))
        return spans

    def _match_words(self, words: List[Word]) -> List[Span]:
        spans = []
        i = 0
        while i < len(words):
            word = words[i]

            if word.text.lower() == "super" and i + 1 < len(words):
                run = self._match_run(words, i + 1)
                if run:
                    name, count = run
                    spans.append(Span(word.start, words[i + count].end, f"Super {name}"))
                    i += 1 + count
                    continue

            run = self._match_run(words, i)
            if run:
                name, count = run
                spans.append(Span(word.start, words[i + count - 1].end, name))
                i += count
                continue

            tiles = self.tiler.tile(word.text)
            if tiles:
                offset = word.start
                for key, name in tiles:
                    spans.append(Span(offset, offset + len(key), name))
                    offset += len(key)
            else:
                logger.debug("Unrecognized trait fragment kept literally: %r", word.text)
                spans.append(Span(word.start, word.end, word.text))
            i += 1
        return spans

    def _match_run(self, words: List[Word], start: int) -> Optional[Tuple[str, int]]:
        """start 위치부터 사전에 있는 가장 긴 단어 묶음 (표준 이름, 단어 수)"""
        longest = min(self.dictionary.longest_word_count, len(words) - start)
        for count in range(longest, 0, -1):
            phrase = " ".join(w.text for w in words[start:start + count])
            name = self.dictionary.lookup_canonical(phrase)
            if name:
                return name, count
        return None

    @staticmethod
    def _words(text: str, start: int, end: int) -> List[Word]:
        return [
            Word(m.group(), start + m.start(), start + m.end())
            for m in _WORD.finditer(text[start:end])
        ]
