"""데이터 모델 정의 모듈"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple, Union
import datetime
import re

from utils.exceptions import ValidationError

# 파라미터 값: 수치(float/int) 또는 "Negative" 같은 상태 문자열
ParameterValue = Union[float, int, str]

# 필터 선택기의 "전체" 값
ALL = "ALL"


class QCStatus(str, Enum):
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PENDING = "PENDING"
    CONDITIONAL = "CONDITIONAL"


class RecordCategory(str, Enum):
    RAW_MATERIAL = "RAW_MATERIAL"
    FINAL_PRODUCT = "FINAL_PRODUCT"
    INTERMEDIATE = "INTERMEDIATE"


class ReportPurpose(str, Enum):
    STANDARD = "STANDARD"
    CUSTOMER_SAMPLE = "CUSTOMER_SAMPLE"
    DELIVERY = "DELIVERY"


CATEGORY_LABELS: Dict[RecordCategory, str] = {
    RecordCategory.RAW_MATERIAL: "원자재",
    RecordCategory.FINAL_PRODUCT: "완제품",
    RecordCategory.INTERMEDIATE: "중간제품",
}

REPORT_PURPOSE_LABELS: Dict[ReportPurpose, str] = {
    ReportPurpose.STANDARD: "표준 제출용",
    ReportPurpose.CUSTOMER_SAMPLE: "고객 샘플 발송",
    ReportPurpose.DELIVERY: "출하 / 상차 허가",
}

STATUS_LABELS: Dict[QCStatus, str] = {
    QCStatus.APPROVED: "승인",
    QCStatus.REJECTED: "불합격",
    QCStatus.PENDING: "대기",
    QCStatus.CONDITIONAL: "조건부",
}


def label_for(labels: Dict, value) -> str:
    """라벨 맵에서 표시 문자열을 찾습니다. 문자열 값도 허용합니다."""
    for key, label in labels.items():
        if value == key or value == key.value:
            return label
    raise ValidationError(f"라벨이 정의되지 않은 값: {value!r}")


# 문자열 앞부분의 숫자만 읽음 ("0.785 g/cm3" -> 0.785)
_LEADING_NUMBER = re.compile(r'\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def is_numeric_value(value) -> bool:
    """bool을 제외한 int/float이면 수치 값으로 봅니다."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_numeric(value) -> float:
    """파라미터 값을 그래프용 숫자로 변환합니다.

    수치는 그대로, 문자열은 앞부분의 숫자를 읽고 단위 등 나머지는 무시합니다.
    숫자로 시작하지 않으면 0.0을 반환합니다. 0과 "데이터 없음"은 구분하지 않습니다.
    """
    if is_numeric_value(value):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return 0.0
        number = float(match.group(0))
    else:
        return 0.0

    # NaN/inf는 그래프에 올릴 수 없음
    if number != number or number in (float('inf'), float('-inf')):
        return 0.0
    return number


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class QCParameter:
    """측정 또는 관찰된 시험 항목 하나"""
    name: str = ""
    value: ParameterValue = 0
    unit: str = ""
    method: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @property
    def is_numeric(self) -> bool:
        return is_numeric_value(self.value)

    @property
    def numeric_value(self) -> float:
        return coerce_numeric(self.value)

    def range_text(self, placeholder: str = "?") -> str:
        low = placeholder if self.min is None else f"{self.min:g}"
        high = placeholder if self.max is None else f"{self.max:g}"
        return f"{low} - {high}"

    def copy(self, **changes) -> "QCParameter":
        return replace(self, **changes)


@dataclass(frozen=True)
class QCRecord:
    """완료된 분석 기록 하나. 생성 후에는 변경되지 않습니다.

    보고 목적에 따라 물류 필드를 정규화합니다.
    STANDARD가 아니면 customer_name이 유지되고, DELIVERY일 때만
    truck_number/driver_name이 유지됩니다. 위반 입력은 오류 대신 지워집니다.
    """
    id: str
    batch_number: str
    product_name: str
    category: RecordCategory
    date: datetime.datetime
    technician: str
    status: QCStatus
    parameters: Tuple[QCParameter, ...] = ()
    report_purpose: ReportPurpose = ReportPurpose.STANDARD
    notes: Optional[str] = None
    customer_name: Optional[str] = None
    truck_number: Optional[str] = None
    driver_name: Optional[str] = None
    ai_analysis: Optional[str] = None

    def __post_init__(self):
        purpose = ReportPurpose(self.report_purpose) if self.report_purpose else ReportPurpose.STANDARD
        object.__setattr__(self, 'report_purpose', purpose)
        object.__setattr__(self, 'category', RecordCategory(self.category))
        object.__setattr__(self, 'status', QCStatus(self.status))
        object.__setattr__(self, 'parameters', tuple(self.parameters))
        object.__setattr__(self, 'notes', _blank_to_none(self.notes))

        customer = _blank_to_none(self.customer_name)
        truck = _blank_to_none(self.truck_number)
        driver = _blank_to_none(self.driver_name)
        if purpose == ReportPurpose.STANDARD:
            customer = None
        if purpose != ReportPurpose.DELIVERY:
            truck = None
            driver = None
        object.__setattr__(self, 'customer_name', customer)
        object.__setattr__(self, 'truck_number', truck)
        object.__setattr__(self, 'driver_name', driver)

    @property
    def category_label(self) -> str:
        return label_for(CATEGORY_LABELS, self.category)

    @property
    def report_purpose_label(self) -> str:
        return label_for(REPORT_PURPOSE_LABELS, self.report_purpose)

    @property
    def status_label(self) -> str:
        return label_for(STATUS_LABELS, self.status)


@dataclass(frozen=True)
class ParameterTemplate:
    """이름 붙은 시험 항목 프리셋"""
    key: str
    label: str
    params: Tuple[QCParameter, ...] = ()


@dataclass(frozen=True)
class TrendPoint:
    """추세 그래프의 점 하나"""
    label: str
    value: float
    product_name: str = ""
    parameter_name: str = ""


@dataclass(frozen=True)
class RecordFilter:
    """보고서 목록 필터. 각 필드의 ALL은 전체 일치를 뜻합니다."""
    search_text: str = ""
    status: str = ALL
    category: str = ALL
    report_purpose: str = ALL
    customer_name: str = ALL


@dataclass(frozen=True)
class RecordStats:
    """대시보드 요약 집계"""
    total: int = 0
    approved: int = 0
    rejected: int = 0
    conditional_or_pending: int = 0


@dataclass
class ReportView:
    """필터링된 보고서 목록과 고객 선택지"""
    records: Tuple[QCRecord, ...] = ()
    customers: Tuple[str, ...] = ()


@dataclass
class DashboardView:
    """대시보드에 필요한 집계와 추세"""
    stats: RecordStats = field(default_factory=RecordStats)
    density_trend: Tuple[TrendPoint, ...] = ()
    purity_trend: Tuple[TrendPoint, ...] = ()
