"""
profile.py - 개체별 유전자 상태 집계
한 개체의 발현 형질 / 보인자 토큰 -> 유전자 키별 GeneProfileEntry
"""

import logging
import math
from typing import Any, Dict, Mapping, Optional, Union

from .classifier import DescriptorClassifier
from .gene_library import GeneDictionary, get_default_dictionary, normalize_key
from .models import Animal, GeneCategory, GeneProfileEntry

logger = logging.getLogger(__name__)


GeneProfile = Dict[str, GeneProfileEntry]


def infer_group(entry: Optional[GeneProfileEntry]) -> Optional[GeneCategory]:
    """
    사전에 없는 유전자의 유전 방식 추론
    보인자 신호 -> 열성, 발현(슈퍼 포함) -> 불완전 우성, 그 외 -> None
    """
    if entry is None:
        return None
    if entry.has_het_signal:
        return GeneCategory.RECESSIVE
    if entry.super_visual or entry.visual_count > 0:
        return GeneCategory.INCOMPLETE_DOMINANT
    return None


class ProfileBuilder:
    """GeneProfileEntry 생성기"""

    def __init__(
        self,
        dictionary: Optional[GeneDictionary] = None,
        classifier: Optional[DescriptorClassifier] = None
    ):
        self.dictionary = dictionary or get_default_dictionary()
        self.classifier = classifier or DescriptorClassifier(self.dictionary)

    def build_profile(self, animal: Union[Animal, Mapping[str, Any], None]) -> GeneProfile:
        """
        개체 -> {유전자 키: GeneProfileEntry}

        Args:
            animal: Animal 또는 'morphs'/'hets' 키를 가진 딕셔너리

        Returns:
            정보가 있는 유전자만 담긴 딕셔너리 (입력 순서 유지)
        """
        profile: GeneProfile = {}
        if animal is None:
            return profile
        if not isinstance(animal, Animal):
            animal = Animal.from_dict(dict(animal))

        for token in animal.morphs:
            parsed = self.classifier.parse_visual(token)
            if parsed is None:
                continue
            entry = self._ensure_entry(profile, parsed.canonical_gene)
            if entry is None:
                continue
            entry.visual_count += 1
            entry.super_visual = entry.super_visual or parsed.is_super
            entry.morph_tokens.append(parsed.original)

        for token in animal.hets:
            parsed = self.classifier.parse_het(token)
            if parsed is None:
                continue
            entry = self._ensure_entry(profile, parsed.canonical_gene)
            if entry is None:
                continue
            entry.het_tokens.append(parsed.original)
            # 보인자 표시가 있으면 정량 모델이 없는 그룹도 열성으로 본다
            if entry.group is None or entry.group == GeneCategory.OTHER:
                entry.group = GeneCategory.RECESSIVE
            if parsed.is_certain:
                entry.het_count += 1
            elif math.isfinite(parsed.probability):
                entry.possible_het_probabilities.append(max(0.0, min(1.0, parsed.probability)))

        for entry in profile.values():
            if entry.group is None:
                entry.group = infer_group(entry)

        logger.debug(
            "Built gene profile for %s: %s",
            animal.id or animal.name or "animal", sorted(profile)
        )
        return profile

    def _ensure_entry(self, profile: GeneProfile, display_name: str) -> Optional[GeneProfileEntry]:
        key = normalize_key(display_name)
        if not key:
            return None
        entry = profile.get(key)
        if entry is None:
            entry = GeneProfileEntry(gene=display_name, key=key)
            profile[key] = entry
        elif len(display_name) > len(entry.gene):
            entry.gene = display_name
        if entry.group is None:
            entry.group = self.dictionary.lookup_category(display_name)
        return entry
