"""시험 파라미터 추출 및 추세 계산 모듈

기록의 파라미터 목록에서 이름/단위로 밀도와 순도 항목을 찾아
대시보드 추세 그래프용 점(TrendPoint)으로 변환합니다.

이름 매칭은 부분 문자열 기반의 휴리스틱입니다. 순도 항목 선택 우선순위
(Purity > GC - Normal Hexane > GC - Cyclohexane > 90% 초과 % 항목)는
그래프에 어떤 값이 그려지는지를 결정하므로 순서를 바꾸지 않습니다.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from core.models import QCParameter, QCRecord, TrendPoint, coerce_numeric, is_numeric_value

TREND_WINDOW = 10

DENSITY_KEYWORD = "Density"
PURITY_KEYWORD = "Purity"
GC_KEYWORD = "GC"
PREFERRED_GC_NAMES = ("GC - Normal Hexane", "GC - Cyclohexane")
PERCENT_UNIT = "%"
HIGH_PURITY_THRESHOLD = 90.0


def _contains(text: str, keyword: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return keyword in text
    return keyword.lower() in text.lower()


def _equals(text: str, expected: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return text == expected
    return text.lower() == expected.lower()


def find_parameter(parameters: Iterable[QCParameter],
                   predicate: Callable[[QCParameter], bool]) -> Optional[QCParameter]:
    """조건을 만족하는 첫 번째 파라미터를 반환합니다."""
    for param in parameters:
        if predicate(param):
            return param
    return None


def batch_label(batch_number: str) -> str:
    """배치 번호의 마지막 '-' 뒤 부분을 그래프 라벨로 사용합니다."""
    tail = batch_number.rsplit('-', 1)[-1]
    return tail or batch_number


def _is_high_percentage(param: QCParameter) -> bool:
    return (param.unit == PERCENT_UNIT
            and is_numeric_value(param.value)
            and param.value > HIGH_PURITY_THRESHOLD)


def select_density_parameter(parameters: Sequence[QCParameter],
                             case_sensitive: bool = True) -> Optional[QCParameter]:
    return find_parameter(parameters, lambda p: _contains(p.name, DENSITY_KEYWORD, case_sensitive))


def select_purity_parameter(parameters: Sequence[QCParameter],
                            case_sensitive: bool = True) -> Optional[QCParameter]:
    """우선순위에 따라 순도 대표 파라미터를 고릅니다."""
    candidates = [
        p for p in parameters
        if _contains(p.name, PURITY_KEYWORD, case_sensitive)
        or _contains(p.name, GC_KEYWORD, case_sensitive)
        or _is_high_percentage(p)
    ]
    if not candidates:
        return None

    selected = find_parameter(candidates, lambda p: _contains(p.name, PURITY_KEYWORD, case_sensitive))
    for gc_name in PREFERRED_GC_NAMES:
        if selected is None:
            selected = find_parameter(candidates, lambda p, n=gc_name: _equals(p.name, n, case_sensitive))
    if selected is None:
        selected = find_parameter(candidates, _is_high_percentage)
    return selected


def _trend(records: Iterable[QCRecord],
           selector: Callable[[Sequence[QCParameter]], Optional[QCParameter]],
           window: int) -> List[TrendPoint]:
    points = []
    for record in records:
        param = selector(record.parameters)
        if param is None:
            continue
        value = coerce_numeric(param.value)
        if value <= 0:
            continue
        points.append(TrendPoint(
            label=batch_label(record.batch_number),
            value=value,
            product_name=record.product_name,
            parameter_name=param.name,
        ))
    if window <= 0:
        return []
    return points[-window:]


def density_trend(records: Iterable[QCRecord], window: int = TREND_WINDOW,
                  case_sensitive: bool = True) -> List[TrendPoint]:
    """밀도 추세. 기록 순서를 유지하며 최근 window개만 반환합니다."""
    return _trend(records, lambda params: select_density_parameter(params, case_sensitive), window)


def purity_trend(records: Iterable[QCRecord], window: int = TREND_WINDOW,
                 case_sensitive: bool = True) -> List[TrendPoint]:
    """순도 추세. 값이 0 이하이거나 파싱 불가한 항목은 제외됩니다."""
    return _trend(records, lambda params: select_purity_parameter(params, case_sensitive), window)
