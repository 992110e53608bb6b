"""
Morph Engine - 사용 예시
다양한 입력 / 교배 시나리오
"""

import os

from morph_engine import (
    Animal,
    MorphEngine,
    OddsTableGenerator,
    OddsVisualizer, ChartConfig,
    LogicValidator,
    GeneDictionary,
)
from morph_engine.gene_library import GENE_GROUPS


def example_1_parse_input():
    """
    예시 1: 자유 입력 문자열 정규화
    - 구분자 / 붙여 쓴 이름 / 확률 표기 혼합
    """
    print("\n" + "="*60)
    print("예시 1: 형질 문자열 정규화")
    print("="*60)

    engine = MorphEngine()

    inputs = [
        "Pastel Mojave Clown",
        "PastelMojaveClown",
        "SuperPastelMojave",
        "PastelMojave50%hetClown",
        "Butter, 66% het Clown",
        "Butter possiable het Clown",
    ]

    for text in inputs:
        tokens = engine.segment(text)
        traits = engine.classify(tokens)
        print(f"\n  입력: {text!r}")
        print(f"    토큰: {tokens}")
        print(f"    발현: {traits.visual}")
        print(f"    보인자: {traits.het}")
        print(f"    편집용: {engine.format_tokens(traits.visual, traits.het)}")


def example_2_recessive_pairing():
    """
    예시 2: 열성 유전 교배
    - 보인자 x 보인자 -> 1/4 발현, 1/2 보인자, 1/4 정상
    """
    print("\n" + "="*60)
    print("예시 2: 열성 유전 (Het Albino x Het Albino)")
    print("="*60)

    engine = MorphEngine()
    male = Animal(id="M1", name="Sire", sex="M", hets=["Albino"])
    female = Animal(id="F1", name="Dam", sex="F", hets=["Albino"])

    report = engine.compute_pairing_odds(male, female)

    table_gen = OddsTableGenerator()
    print("\n【유전자별 결과】")
    print(table_gen.generate_gene_table(report.per_gene).to_markdown())

    validator = LogicValidator()
    validation = validator.validate_logic(report)
    print(f"\n【검증 결과】: {'✓ 통과' if validation.is_valid else '✗ 실패'}")


def example_3_multi_gene():
    """
    예시 3: 다유전자 교배
    - 불완전 우성 + 열성 + 가능성 보인자
    """
    print("\n" + "="*60)
    print("예시 3: 다유전자 교배")
    print("="*60)

    engine = MorphEngine()
    male = engine.animal_from_text("Super Pastel, Clown", sex="M", name="Sire")
    female = engine.animal_from_text("Mojave 66% het Clown", sex="F", name="Dam")

    report = engine.compute_pairing_odds(male, female)

    table_gen = OddsTableGenerator()
    data = table_gen.create_report_data(report)

    print("\n【유전자별 결과】")
    print(data['per_gene_markdown'])
    print("\n【결합 결과】")
    print(data['combined_markdown'])


def example_4_visualization():
    """
    예시 4: 확률 차트
    """
    print("\n" + "="*60)
    print("예시 4: 확률 차트")
    print("="*60)

    engine = MorphEngine()
    male = engine.animal_from_text("Pastel Mojave Het Clown", sex="M")
    female = engine.animal_from_text("Clown, Het Pied", sex="F")
    report = engine.compute_pairing_odds(male, female)

    visualizer = OddsVisualizer(
        config=ChartConfig(fig_width=12, font_size_label=9)
    )
    visualizer.save_to_file(
        report,
        filepath="output/example_odds.png",
        title="Pastel Mojave Het Clown x Clown Het Pied"
    )
    print("✓ 차트 이미지 저장: output/example_odds.png")


def example_5_custom_dictionary():
    """
    예시 5: 사용자 정의 유전자 사전
    - 기본 사전에 새 유전자 추가
    """
    print("\n" + "="*60)
    print("예시 5: 사용자 정의 사전")
    print("="*60)

    groups = {name: list(genes) for name, genes in GENE_GROUPS.items()}
    groups["Recessive"].append("Sunset Fire")
    dictionary = GeneDictionary(groups)

    engine = MorphEngine(dictionary=dictionary)
    print(f"\n  사전 크기: {len(dictionary)}")
    print(f"  'SunsetFirePastel' -> {engine.segment('SunsetFirePastel')}")

    report = engine.compute_pairing_odds(
        engine.animal_from_text("Sunset Fire", sex="M"),
        engine.animal_from_text("Het Sunset Fire", sex="F"),
    )
    for result in report.per_gene:
        print(f"\n  {result.gene}: {result.notes}")
        for outcome in result.outcomes:
            print(f"    {outcome.label}: {outcome.probability:.2f}")


def main():
    """모든 예시 실행"""
    os.makedirs("output", exist_ok=True)

    print("\n" + "#"*60)
    print("# Morph Engine - 사용 예시")
    print("#"*60)

    example_1_parse_input()
    example_2_recessive_pairing()
    example_3_multi_gene()
    example_4_visualization()
    example_5_custom_dictionary()

    print("\n" + "="*60)
    print("모든 예시 실행 완료!")
    print("="*60)


if __name__ == "__main__":
    main()
