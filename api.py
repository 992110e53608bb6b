"""
Morph Engine - Flask REST API
웹 서비스용 API 엔드포인트

실행: flask --app api run --debug
또는: python api.py
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS

from morph_engine import (
    MorphEngine, OddsTableGenerator,
    OddsVisualizer, LogicValidator,
    Animal, GeneCategory
)
from morph_engine.logging_config import configure_logging

logger = logging.getLogger("morph_engine.api")

app = Flask(__name__)
CORS(app)  # CORS 활성화

# 전역 객체 (사전은 읽기 전용이므로 요청 간 공유)
engine = MorphEngine()
table_generator = OddsTableGenerator()
visualizer = OddsVisualizer()
validator = LogicValidator()


class BadRequest(ValueError):
    """요청 형식 오류 (400)"""


def _get_json() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("요청 본문은 JSON 객체여야 합니다")
    return data


def _get_text(data: dict, key: str) -> str:
    value = data.get(key, "")
    if value is None:
        return ""
    if not isinstance(value, str):
        raise BadRequest(f"'{key}'는 문자열이어야 합니다")
    return value


def _get_token_list(data: dict, key: str) -> list:
    value = data.get(key) or []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise BadRequest(f"'{key}'는 문자열 목록이어야 합니다")
    return value


def _get_animal(data: dict, key: str, sex: str) -> Animal:
    """
    개체 입력 해석

    문자열이면 자유 입력으로 분할, 객체면 {morphs, hets} 레코드로 사용
    """
    value = data.get(key)
    if value is None or isinstance(value, str):
        return engine.animal_from_text(value or "", sex=sex, name=key)
    if not isinstance(value, dict):
        raise BadRequest(f"'{key}'는 문자열 또는 객체여야 합니다")
    return Animal(
        id=str(value.get('id', key)),
        name=str(value.get('name', key)),
        sex=sex,
        morphs=_get_token_list(value, 'morphs'),
        hets=_get_token_list(value, 'hets')
    )


def _error(message: str, status: int):
    return jsonify({
        'success': False,
        'error': message
    }), status


@app.route('/')
def index():
    """API 정보"""
    return jsonify({
        'name': 'Morph Engine API',
        'version': '1.0.0',
        'description': '파충류 모프 형질 정규화 및 교배 확률 계산 API',
        'endpoints': {
            '/genes': 'GET - 유전자 사전 목록 (?group=Recessive)',
            '/segment': 'POST - 형질 문자열 토큰 분할',
            '/classify': 'POST - 토큰을 발현/보인자로 분류',
            '/profile': 'POST - 개체의 유전자 프로필',
            '/odds': 'POST - 교배 확률 계산',
            '/validate': 'POST - 교배 확률 결과 검증'
        }
    })


@app.route('/genes', methods=['GET'])
def get_genes():
    """유전자 사전 목록"""
    group = request.args.get('group')
    if group:
        wanted = " ".join(group.split()).lower()
        category = next((c for c in GeneCategory if c.value.lower() == wanted), None)
        if category is None:
            return _error(f"알 수 없는 그룹: {group}", 400)
        entries = engine.dictionary.entries_in(category)
    else:
        entries = list(engine.dictionary)

    return jsonify({
        'count': len(entries),
        'genes': [
            {'name': e.canonical_name, 'group': e.category.value}
            for e in entries
        ]
    })


@app.route('/segment', methods=['POST'])
def segment_text():
    """
    형질 문자열 토큰 분할

    Request Body:
    {
        "text": "PastelMojave50%hetClown"
    }
    """
    try:
        data = _get_json()
        text = _get_text(data, 'text')
        return jsonify({
            'success': True,
            'tokens': engine.segment(text)
        })
    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Segment request failed")
        return _error(str(e), 500)


@app.route('/classify', methods=['POST'])
def classify_tokens():
    """
    토큰 분류

    Request Body:
    {
        "tokens": ["Pastel", "50% Het Clown"],  // 또는
        "text": "Pastel 50% het Clown"
    }
    """
    try:
        data = _get_json()
        if 'tokens' in data:
            traits = engine.classify(_get_token_list(data, 'tokens'))
        else:
            traits = engine.split_input(_get_text(data, 'text'))

        return jsonify({
            'success': True,
            'visual': traits.visual,
            'het': traits.het,
            'display': engine.classifier.display_tokens(traits.visual, traits.het),
            'formatted': engine.format_tokens(traits.visual, traits.het)
        })
    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Classify request failed")
        return _error(str(e), 500)


@app.route('/profile', methods=['POST'])
def build_profile():
    """
    개체 유전자 프로필

    Request Body:
    {
        "animal": {"morphs": ["Pastel"], "hets": ["Clown"]}  // 또는 문자열
    }
    """
    try:
        data = _get_json()
        animal = _get_animal(data, 'animal', sex='F')
        profile = engine.build_profile(animal)

        return jsonify({
            'success': True,
            'profile': {key: entry.to_dict() for key, entry in profile.items()}
        })
    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Profile request failed")
        return _error(str(e), 500)


@app.route('/odds', methods=['POST'])
def compute_odds():
    """
    교배 확률 계산

    Request Body:
    {
        "male": "Pastel Het Clown",         // 문자열 또는 {morphs, hets}
        "female": {"morphs": ["Clown"]},
        "chart": false                       // 차트 이미지 포함 여부
    }
    """
    try:
        data = _get_json()
        male = _get_animal(data, 'male', sex='M')
        female = _get_animal(data, 'female', sex='F')

        report = engine.compute_pairing_odds(male, female)

        # 검증
        validation = validator.validate_logic(report)

        if not validation.is_valid:
            return jsonify({
                'success': False,
                'error': '논리 검증 실패',
                'validation_errors': [
                    {'message': e.message, 'details': e.details}
                    for e in validation.get_errors()
                ]
            }), 500

        result = {
            'success': True,
            'parents': {
                'male': male.to_dict(),
                'female': female.to_dict()
            },
            'odds': engine.to_dict(report),
            'tables': table_generator.create_report_data(report)
        }

        if data.get('chart'):
            chart_img = visualizer.get_base64_image(report)
            result['images'] = {
                'chart': f"data:image/png;base64,{chart_img}"
            }

        return jsonify(result)

    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Odds request failed")
        return _error(str(e), 500)


@app.route('/validate', methods=['POST'])
def validate_odds():
    """
    교배 확률 결과 검증

    Request Body:
    {
        "male": ..., "female": ...   // /odds와 동일
    }
    """
    try:
        data = _get_json()
        male = _get_animal(data, 'male', sex='M')
        female = _get_animal(data, 'female', sex='F')

        report = engine.compute_pairing_odds(male, female)
        validation = validator.validate_logic(report)

        return jsonify({
            'success': True,
            'validation': validation.to_dict()
        })
    except BadRequest as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("Validate request failed")
        return _error(str(e), 500)


if __name__ == '__main__':
    configure_logging()
    print("=" * 50)
    print("Morph Engine API Server")
    print("=" * 50)
    print("Server starting at http://localhost:5000")
    print()
    app.run(debug=True, host='0.0.0.0', port=5000)
