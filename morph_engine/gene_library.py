"""
gene_library.py - 유전자 사전
유전자 이름(철자 변형/별칭 포함) -> 표준 이름, 유전 방식 조회
"""

import logging
import re
import threading
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .models import DictionaryEntry, GeneCategory

logger = logging.getLogger(__name__)


GENE_GROUPS: Dict[str, List[str]] = {
    "Recessive": [
        "210 Hypo", "Albino", "Atomic", "Axanthic", "Axanthic (GCR)", "Axanthic (Jolliff)", "Axanthic (MJ)",
        "Axanthic (TSK)", "Axanthic (VPI)", "Bengal", "Black Axanthic", "Black Lace", "Candy", "Caramel Albino",
        "Clown", "Cryptic", "Desert Ghost", "Enhancer", "Genetic Stripe", "Ghost (Vesper)", "Hypo",
        "Lavender Albino", "Maple", "Metal Flake", "Migraine", "Monarch", "Monsoon", "Moray", "Orange Crush",
        "Orange Ghost", "Paint", "Patternless", "Piebald", "Puzzle", "Rainbow", "Sahara", "Sandstorm", "Sunset",
        "Tornado", "Tri-stripe", "Ultramel", "Whitewash", "Zebra",
    ],
    "Incomplete Dominant": [
        "Acid", "Ajax", "Alloy", "Ambush", "Arcane", "Arroyo", "Asphalt", "Astro", "Bald", "Bambino", "Bamboo",
        "Banana", "Bang", "Black Head", "Black Pastel", "Blade", "Bongo", "Butter", "Cafe", "Calico", "Carbon",
        "Carnivore", "Champagne", "Chino", "Chocolate", "Cinder", "Cinnamon", "Circle", "Citron", "Coffee",
        "Copper", "Creed", "Cypress", "Dark Viking", "Diesel", "Disco", "Dot", "EMG", "Enchi", "Epic", "Exo-lbb",
        "Fire", "Flame", "FNR Vanilla", "Furrow", "Fusion", "Gaia", "Gallium", "GeneX", "GHI", "Glossy", "Gobi",
        "Granite", "Gravel", "Grim", "Het Red Axanthic", "Hidden Gene Woma", "Hieroglyphic", "High Intensity OD",
        "Honey", "Huffman", "Hydra", "Jaguar", "Java", "Jedi", "Jolliff Tiger", "Jolt", "Joppa", "Jungle Woma",
        "KRG", "Lace", "LC Black Magic", "Lemonback", "Lesser", "Mahogany", "Mario", "Marvel", "Mckenzie", "Melt",
        "Microscale", "Mocha", "Mojave", "Mosaic", "Motley", "Mystic", "Nanny", "Nico", "Nr Mandarin", "Nyala",
        "Odium", "OFY", "Orange Dream", "Orbit", "Panther", "Pastel", "Peach", "Phantom", "Phenomenon", "Pixel",
        "Quake", "Rain", "RAR", "Raven", "Razor", "Reaper", "Red Gene", "Red Stripe", "Rhino", "Russo", "Saar",
        "Sable", "Sandblast", "Sapphire", "Satin", "Scaleless Head", "Scrambler", "Shadow", "Sherg", "Shrapnel",
        "Shredder", "Smuggler", "Spark", "Special", "Specter", "Spider", "Splatter", "Spotnose", "Stranger",
        "Striker", "Sulfur", "Surge", "Taronja", "The Darkling", "Trick", "Trident", "Trojan", "Twister",
        "Vanilla", "Vudoo", "Web", "Woma", "Wookie", "Wrecking Ball", "X-treme Gene", "X-tremist",
        "Yellow Belly", "Zuwadi",
    ],
    "Dominant": [
        "Adder", "AHI", "Ashen", "Black Belly", "Confusion", "Congo", "Desert", "Eramosa", "Frost", "Gold Blush",
        "Harlequin", "Het Daddy", "Josie", "Leopard", "Mordor", "Nova", "Oriole", "Pinstripe", "Redhead",
        "Shatter", "Splash", "Static", "Sunrise", "Vesper", "Zip Belly",
    ],
    "Polygenic": ["Brown Back", "Fader", "Genetic Black Back", "Genetic Reduced"],
    "Other": ["Dinker", "Hybrid", "Normal", "Paradox", "RECO", "Ringer", "Ringer Mark"],
    "Locality": ["Volta"],
}

GENE_ALIASES: Dict[str, str] = {
    "ultramelanistic": "Ultramel",
}

# 악산틱 라인 표기 변형
AXANTHIC_LINES: List[Tuple[str, str]] = [
    (r"tsk", "TSK"),
    (r"gcr", "GCR"),
    (r"jol(?:l|liff)", "Jolliff"),
    (r"mj", "MJ"),
    (r"vpi", "VPI"),
]

_BRACKETS = re.compile(r"[()\[\]{}]")
_SEPARATORS = re.compile(r"[-_/]")
_PAREN_GROUP = re.compile(r"\(.*?\)")
_SUPER_WORD = re.compile(r"^super[\s-]+", re.IGNORECASE)
_SUPER_CAMEL = re.compile(r"^[Ss]uper([A-Z].*)$")
_HET_MARKERS = re.compile(
    r"^(?:\d{1,3}(?:\.\d+)?\s*%\s*)?(?:(?:pos(?:s?i?a?ble)?|probable|maybe|ph)\s+)?het\s+",
    re.IGNORECASE,
)
_PERCENT_MARKER = re.compile(r"^\d{1,3}(?:\.\d+)?\s*%\s*")
_AXANTHIC_VARIANT = re.compile(r"^\s*axanthic\s*\(([^)]+)\)", re.IGNORECASE)


def normalize_key(raw) -> str:
    """
    조회용 정규화 키 생성
    괄호 제거, '-', '_', '/' -> 공백, 공백 압축, 소문자화
    """
    if raw is None:
        return ""
    text = _BRACKETS.sub(" ", str(raw))
    text = _SEPARATORS.sub(" ", text)
    return " ".join(text.split()).lower()


def compact_key(raw) -> str:
    """공백 없는 압축 키 (붙여쓴 문자열 분할용)"""
    return normalize_key(raw).replace(" ", "")


def has_het_markers(raw) -> bool:
    """'het', 백분율 표시가 붙어 있는지"""
    text = " ".join(str(raw or "").split())
    return bool(_HET_MARKERS.match(text) or _PERCENT_MARKER.match(text))


class GeneDictionary:
    """
    유전자 사전 (생성 후 읽기 전용)

    - 정규화 키 -> 표준 이름 (별칭 충돌 시 먼저 등록된 이름 우선)
    - 압축 키 -> 표준 이름 ('super' + 키 합성 항목 포함)
    """

    def __init__(
        self,
        groups: Mapping[str, List[str]],
        aliases: Optional[Mapping[str, str]] = None
    ):
        entries: Dict[str, DictionaryEntry] = {}
        compact: Dict[str, str] = {}
        ordered: List[DictionaryEntry] = []

        for group, genes in groups.items():
            category = GeneCategory.from_label(group)
            for gene in genes:
                name = " ".join(str(gene or "").split())
                key = normalize_key(name)
                if not key or key in entries:
                    continue
                entry = DictionaryEntry(canonical_name=name, category=category)
                entries[key] = entry
                ordered.append(entry)

        for alias, target in (aliases or {}).items():
            alias_key = normalize_key(alias)
            target_entry = entries.get(normalize_key(target))
            if alias_key and target_entry and alias_key not in entries:
                entries[alias_key] = target_entry

        for key, entry in entries.items():
            compact.setdefault(key.replace(" ", ""), entry.canonical_name)
        for key, entry in entries.items():
            compact.setdefault("super" + key.replace(" ", ""), f"Super {entry.canonical_name}")

        self._entries = MappingProxyType(entries)
        self._compact = MappingProxyType(compact)
        self._ordered = tuple(ordered)
        self.longest_word_count = max((len(k.split()) for k in entries), default=1)
        self.longest_compact_length = max((len(k) for k in compact), default=1)

        logger.debug(
            "Gene dictionary built: %d entries, %d compact keys",
            len(self._ordered), len(self._compact)
        )

    @classmethod
    def default(cls) -> 'GeneDictionary':
        return cls(GENE_GROUPS, GENE_ALIASES)

    def __len__(self) -> int:
        return len(self._ordered)

    def __iter__(self) -> Iterator[DictionaryEntry]:
        return iter(self._ordered)

    def __contains__(self, raw) -> bool:
        return self.lookup_canonical(raw) is not None

    @property
    def compact_index(self) -> Mapping[str, str]:
        return self._compact

    def get_entry(self, raw) -> Optional[DictionaryEntry]:
        return self._entries.get(normalize_key(raw))

    def lookup_canonical(self, raw) -> Optional[str]:
        """표준 이름 조회 (없으면 None -> 호출 측은 입력을 그대로 사용)"""
        entry = self.get_entry(raw)
        return entry.canonical_name if entry else None

    def lookup_compact(self, fragment: str) -> Optional[str]:
        return self._compact.get(fragment)

    def lookup_category(self, raw) -> Optional[GeneCategory]:
        """
        유전 방식 조회 (사전에 없으면 None)

        전체 이름이 사전 항목이면 그대로 사용하고, 아니면
        괄호 제거 / 'super' 제거 / het·백분율 제거 / 별칭 / 악산틱 라인 순으로 시도
        """
        for candidate in self._candidates(raw):
            entry = self._entries.get(normalize_key(candidate))
            if entry:
                return entry.category
        return None

    def category_of(self, raw) -> GeneCategory:
        """
        유전 방식 (모르는 유전자는 OTHER)
        사전 항목 자체가 아닌데 het/백분율 표시가 붙어 있으면 열성으로 간주
        """
        if self.get_entry(raw) is None and has_het_markers(raw):
            return GeneCategory.RECESSIVE
        return self.lookup_category(raw) or GeneCategory.OTHER

    def entries_in(self, category: GeneCategory) -> List[DictionaryEntry]:
        return [e for e in self._ordered if e.category == category]

    def _candidates(self, raw) -> List[str]:
        seen: List[str] = []

        def enqueue(value):
            value = " ".join(str(value or "").split())
            if value and value.lower() not in [s.lower() for s in seen]:
                seen.append(value)

        original = " ".join(str(raw or "").split())
        if not original:
            return []
        enqueue(original)

        no_parens = " ".join(_PAREN_GROUP.sub("", original).split())
        enqueue(no_parens)

        strip_super = _SUPER_WORD.sub("", no_parens).strip()
        enqueue(strip_super)
        camel = _SUPER_CAMEL.match(no_parens)
        if camel:
            enqueue(camel.group(1))

        axanthic = _AXANTHIC_VARIANT.match(original)
        if axanthic:
            variant = " ".join(axanthic.group(1).split())
            line = None
            for pattern, canonical in AXANTHIC_LINES:
                if re.search(pattern, variant, re.IGNORECASE):
                    line = canonical
                    break
            if line is None:
                line = re.sub(r"\s*line$", "", variant, flags=re.IGNORECASE).strip()
            if line:
                enqueue(f"Axanthic ({line})")
            enqueue("Axanthic")

        strip_het = _HET_MARKERS.sub("", strip_super).strip()
        enqueue(strip_het)
        enqueue(_PERCENT_MARKER.sub("", strip_het).strip())
        return seen


_default_dictionary: Optional[GeneDictionary] = None
_default_lock = threading.Lock()


def get_default_dictionary() -> GeneDictionary:
    """기본 사전 (처음 호출 시 한 번만 생성, 스레드 안전)"""
    global _default_dictionary
    if _default_dictionary is None:
        with _default_lock:
            if _default_dictionary is None:
                _default_dictionary = GeneDictionary.default()
    return _default_dictionary
