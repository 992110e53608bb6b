"""
Morph Engine - 파충류 모프 교배 확률 계산기
메인 실행 파일

사용법:
    python main.py --male "Pastel Het Clown" --female "Clown"
    python main.py -m "Super Pastel" -f "Normal" --save --chart
    python main.py -m "PastelMojave50%hetClown" -f "Butter, 66% het Clown" --no-display --save
"""

import argparse
import base64
import json
import logging
import os
import sys
from datetime import datetime

from morph_engine import (
    MorphEngine,
    OddsTableGenerator,
    OddsVisualizer,
    LogicValidator,
)
from morph_engine.logging_config import configure_logging

logger = logging.getLogger("morph_engine.cli")


class PairingCalculator:
    """
    CLI 메인 클래스
    두 부모 형질 문자열 -> 교배 확률 계산, 표시, 저장
    """

    def __init__(self):
        self.engine = MorphEngine()
        self.table_generator = OddsTableGenerator()
        self.visualizer = OddsVisualizer()
        self.validator = LogicValidator()

    def compute(self, male_text: str, female_text: str, chart: bool = False) -> dict:
        """
        교배 확률 계산

        Args:
            male_text: 수컷 형질 문자열
            female_text: 암컷 형질 문자열
            chart: 차트 이미지 생성 여부

        Returns:
            결과 데이터 딕셔너리
        """
        print(f"\n{'='*50}")
        print("🧬 Morph Engine - 교배 확률 계산 중...")
        print(f"{'='*50}")

        male = self.engine.animal_from_text(male_text, sex="M", name="Sire")
        female = self.engine.animal_from_text(female_text, sex="F", name="Dam")
        print(f"수컷: {', '.join(self.engine.classifier.display_tokens(male.morphs, male.hets)) or 'Normal'}")
        print(f"암컷: {', '.join(self.engine.classifier.display_tokens(female.morphs, female.hets)) or 'Normal'}")
        print()

        report = self.engine.compute_pairing_odds(male, female)
        print(f"✓ 확률 계산 완료 (유전자 {len(report.per_gene)}개, 결합 결과 {len(report.combined)}개)")

        # 논리 검증
        validation_report = self.validator.validate_logic(report)
        print(f"✓ 논리 검증 완료: {'통과' if validation_report.is_valid else '실패'}")

        if not validation_report.is_valid:
            print("\n⚠️ 검증 오류:")
            for error in validation_report.get_errors():
                print(f"  - {error.message}")
            return {
                'success': False,
                'error': '논리 검증 실패',
                'validation': validation_report.to_dict()
            }

        result = {
            'success': True,
            'timestamp': datetime.now().isoformat(),
            'parents': {
                'male': male.to_dict(),
                'female': female.to_dict()
            },
            'odds': self.engine.to_dict(report),
            'tables': self.table_generator.create_report_data(report),
            'validation': validation_report.to_dict()
        }

        if chart:
            result['images'] = {
                'chart': self.visualizer.get_base64_image(report, title="Pairing odds")
            }
            print("✓ 차트 이미지 생성 완료")

        return result

    def display(self, result: dict):
        """결과를 콘솔에 표시"""
        if not result.get('success'):
            print(f"❌ 오류: {result.get('error')}")
            return

        print("\n" + "="*60)
        print("📋 교배 확률")
        print("="*60)

        tables = result['tables']
        if not tables['per_gene_display']:
            print("\n계산할 유전자가 없습니다 (모두 Normal).")
            return

        print("\n【유전자별 결과】")
        print(tables['per_gene_markdown'])

        print("\n【결합 결과】")
        print(tables['combined_markdown'])

    def save(self, result: dict, output_dir: str = "output"):
        """결과를 파일로 저장"""
        if not result.get('success'):
            print("❌ 저장할 결과가 없습니다.")
            return

        os.makedirs(output_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base_name = f"pairing_{timestamp}"

        # JSON 데이터 저장 (이미지 제외)
        json_data = {k: v for k, v in result.items() if k != 'images'}
        json_path = os.path.join(output_dir, f"{base_name}.json")
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump(json_data, f, ensure_ascii=False, indent=2)
        print(f"✓ JSON 저장: {json_path}")

        if result.get('images'):
            chart_path = os.path.join(output_dir, f"{base_name}_chart.png")
            with open(chart_path, 'wb') as f:
                f.write(base64.b64decode(result['images']['chart']))
            print(f"✓ 차트 이미지 저장: {chart_path}")


def parse_args(argv=None):
    """명령줄 인자 파싱"""
    parser = argparse.ArgumentParser(
        description="Morph Engine - 파충류 모프 교배 확률 계산기"
    )

    parser.add_argument(
        '--male', '-m',
        type=str,
        default='',
        help="수컷 형질 (예: 'Pastel, Het Clown')"
    )

    parser.add_argument(
        '--female', '-f',
        type=str,
        default='',
        help="암컷 형질 (예: 'Clown')"
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        default='output',
        help="출력 디렉토리 (기본: output)"
    )

    parser.add_argument(
        '--save',
        action='store_true',
        help="결과를 파일로 저장"
    )

    parser.add_argument(
        '--chart',
        action='store_true',
        help="확률 차트 이미지 생성"
    )

    parser.add_argument(
        '--no-display',
        action='store_true',
        help="콘솔 출력 생략"
    )

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """메인 함수"""
    args = parse_args(argv)
    configure_logging()

    calculator = PairingCalculator()
    result = calculator.compute(args.male, args.female, chart=args.chart)

    if not args.no_display:
        calculator.display(result)

    if args.save:
        calculator.save(result, args.output)

    if not result.get('success'):
        logger.error("Pairing failed: %s", result.get('error'))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
