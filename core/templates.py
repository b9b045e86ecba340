"""시험 템플릿 및 기록 작성 모듈

템플릿으로 새 기록의 파라미터 목록을 채우고, 작성 중인 초안(RecordDraft)을
확정된 QCRecord로 변환합니다. 템플릿 레지스트리의 객체는 항상 복사해서
넘겨주므로 기록을 편집해도 템플릿이 바뀌지 않습니다.
"""

import datetime
import threading
import time
from dataclasses import dataclass, field, fields
from typing import Callable, Dict, List, Optional, Sequence

from core.models import (
    ParameterTemplate, QCParameter, QCRecord, QCStatus, RecordCategory, ReportPurpose,
)
from utils.exceptions import ParameterEditError, TemplateNotFoundError, ValidationError


def _astm_d86(label: str, unit: str = '°C') -> QCParameter:
    return QCParameter(name=label, value=0, unit=unit, method='ASTM D86')


TEST_TEMPLATES: Dict[str, ParameterTemplate] = {
    'EMPTY': ParameterTemplate('EMPTY', '빈 양식 (수동 입력)'),
    'DISTILLATION': ParameterTemplate('DISTILLATION', '상압 증류 (ASTM D86)', (
        _astm_d86('ASTM D86 - IBP'),
        _astm_d86('ASTM D86 - 5%'),
        _astm_d86('ASTM D86 - 10%'),
        _astm_d86('ASTM D86 - 20%'),
        _astm_d86('ASTM D86 - 30%'),
        _astm_d86('ASTM D86 - 40%'),
        _astm_d86('ASTM D86 - 50%'),
        _astm_d86('ASTM D86 - 60%'),
        _astm_d86('ASTM D86 - 70%'),
        _astm_d86('ASTM D86 - 80%'),
        _astm_d86('ASTM D86 - 90%'),
        _astm_d86('ASTM D86 - 95%'),
        _astm_d86('ASTM D86 - FBP'),
        _astm_d86('Recovery', 'vol%'),
        _astm_d86('Residue', 'vol%'),
        _astm_d86('Loss', 'vol%'),
    )),
    'GC_ANALYSIS': ParameterTemplate('GC_ANALYSIS', 'GC 분석 (헥산/벤젠)', (
        QCParameter('GC - Normal Hexane', 0, '%', 'ASTM D611 / GC', 0, 100),
        QCParameter('GC - Cyclohexane', 0, '%', 'ASTM D611 / GC', 0, 100),
        QCParameter('GC - Benzene', 0, '%', 'ASTM D611 / GC', 0, 100),
        QCParameter('Density @ 15°C', 0, 'g/cm3', 'ASTM D4052'),
    )),
    'IMPURITIES_COMPLEMENTARY': ParameterTemplate('IMPURITIES_COMPLEMENTARY', '보완 시험 (닥터 테스트, 황, 브롬 등)', (
        QCParameter('Doctor Test (Mercaptans)', 'Negative', '-', 'ASTM D4952'),
        QCParameter('Reaction w/ Methyl Orange', 'Neutral', '-', 'ISIRI Method'),
        QCParameter('Total Sulfur', 0, 'ppm', 'ASTM D5453'),
        QCParameter('Water Content', 0, 'ppm', 'ASTM D6304'),
        QCParameter('Bromine Index', 0, 'mg/100g', 'ASTM D2710'),
    )),
    'ABSORBANCE': ParameterTemplate('ABSORBANCE', '흡광도 시험 (UV)', (
        QCParameter('Absorbance @ 240nm', 0, 'Abs', 'Spectrophotometry'),
        QCParameter('Absorbance @ 280nm', 0, 'Abs', 'Spectrophotometry'),
    )),
    'GENERAL_PHYSICAL': ParameterTemplate('GENERAL_PHYSICAL', '일반 물성', (
        QCParameter('Density @ 15°C', 0, 'g/cm3', 'ASTM D4052'),
        QCParameter('Viscosity', 0, 'cP', 'ASTM D445'),
        QCParameter('Flash Point', 0, '°C', 'ASTM D93'),
        QCParameter('Pour Point', 0, '°C', 'ASTM D97'),
    )),
    'ACID_BASE': ParameterTemplate('ACID_BASE', '산/가성소다/올레움 순도', (
        QCParameter('Acid Purity', 0, '%', 'Titration'),
        QCParameter('Liquid Caustic Soda Purity', 0, '%', 'Titration'),
        QCParameter('Oleum Purity', 0, '%', 'Titration'),
        QCParameter('Density', 0, 'g/cm3', 'ASTM D1298'),
    )),
}

EDITABLE_FIELDS = tuple(f.name for f in fields(QCParameter))


def template_labels() -> Dict[str, str]:
    """템플릿 선택기에 표시할 {키: 라벨}"""
    return {key: template.label for key, template in TEST_TEMPLATES.items()}


def template_parameters(template_key: str) -> List[QCParameter]:
    """템플릿 파라미터의 독립 복사본 목록을 반환합니다."""
    template = TEST_TEMPLATES.get(template_key)
    if template is None:
        raise TemplateNotFoundError(f"알 수 없는 템플릿: {template_key}")
    return [param.copy() for param in template.params]


def default_parameters() -> List[QCParameter]:
    return [QCParameter('Density @ 15°C', 0, 'g/cm3', 'ASTM D4052', 0, 2)]


# #####################################################################
# # 파라미터 편집 (항상 새 목록 반환)
# #####################################################################

def add_blank_parameter(parameters: Sequence[QCParameter]) -> List[QCParameter]:
    return [param.copy() for param in parameters] + [QCParameter(name='', value=0, unit='', method='')]


def _check_index(parameters: Sequence[QCParameter], index: int):
    if not 0 <= index < len(parameters):
        raise ParameterEditError(f"파라미터 위치가 범위를 벗어났습니다: {index} (총 {len(parameters)}개)")


def update_parameter(parameters: Sequence[QCParameter], index: int, field_name: str, value) -> List[QCParameter]:
    """index 위치 파라미터의 한 필드만 바꾼 새 목록을 반환합니다."""
    _check_index(parameters, index)
    if field_name not in EDITABLE_FIELDS:
        raise ParameterEditError(f"수정할 수 없는 필드: {field_name}")

    new_params = [param.copy() for param in parameters]
    new_params[index] = new_params[index].copy(**{field_name: value})
    return new_params


def remove_parameter(parameters: Sequence[QCParameter], index: int) -> List[QCParameter]:
    _check_index(parameters, index)
    return [param.copy() for i, param in enumerate(parameters) if i != index]


# #####################################################################
# # 기록 초안 및 확정
# #####################################################################

class RecordIdGenerator:
    """밀리초 타임스탬프 기반 ID. 같은 밀리초에 겹치면 1씩 올립니다."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> str:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return str(candidate)


new_record_id = RecordIdGenerator()


@dataclass
class RecordDraft:
    """입력 폼에서 작성 중인 기록"""
    batch_number: str = ""
    product_name: str = ""
    category: RecordCategory = RecordCategory.FINAL_PRODUCT
    technician: str = ""
    status: QCStatus = QCStatus.PENDING
    notes: str = ""
    report_purpose: ReportPurpose = ReportPurpose.STANDARD
    customer_name: str = ""
    truck_number: str = ""
    driver_name: str = ""
    selected_template: str = 'EMPTY'
    parameters: List[QCParameter] = field(default_factory=default_parameters)

    REQUIRED_FIELDS = ('product_name', 'batch_number', 'technician')

    def apply_template(self, template_key: str):
        """템플릿을 선택합니다. 빈 템플릿이면 현재 파라미터를 유지합니다."""
        params = template_parameters(template_key)
        self.selected_template = template_key
        if params:
            self.parameters = params

    def add_parameter(self):
        self.parameters = add_blank_parameter(self.parameters)

    def update_parameter(self, index: int, field_name: str, value):
        self.parameters = update_parameter(self.parameters, index, field_name, value)

    def remove_parameter(self, index: int):
        self.parameters = remove_parameter(self.parameters, index)

    def missing_fields(self) -> List[str]:
        return [name for name in self.REQUIRED_FIELDS if not str(getattr(self, name) or '').strip()]


def build_record(draft: RecordDraft, now: Optional[datetime.datetime] = None,
                 id_factory: Callable[[], str] = new_record_id) -> QCRecord:
    """초안을 확정된 QCRecord로 만듭니다.

    새 ID와 현재 시각을 부여하고 파라미터를 복사합니다. 보고 목적에 맞지
    않는 고객/차량/운전자 정보는 QCRecord에서 지워집니다.
    """
    missing = draft.missing_fields()
    if missing:
        raise ValidationError(f"필수 항목이 비어 있습니다: {', '.join(missing)}")

    return QCRecord(
        id=id_factory(),
        batch_number=draft.batch_number.strip(),
        product_name=draft.product_name.strip(),
        category=draft.category,
        date=now or datetime.datetime.now(),
        technician=draft.technician.strip(),
        status=draft.status,
        notes=draft.notes,
        parameters=tuple(param.copy() for param in draft.parameters),
        report_purpose=draft.report_purpose,
        customer_name=draft.customer_name,
        truck_number=draft.truck_number,
        driver_name=draft.driver_name,
    )
