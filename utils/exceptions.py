"""커스텀 예외 클래스들"""


class QCLabError(Exception):
    """품질관리 기록 시스템의 기본 예외 클래스"""
    pass


class ConfigurationError(QCLabError):
    """설정 관련 오류"""
    pass


class FileHandlingError(QCLabError):
    """파일 처리 관련 오류"""
    pass


class ValidationError(QCLabError):
    """데이터 검증 관련 오류"""
    pass


class TemplateNotFoundError(ValidationError):
    """존재하지 않는 시험 템플릿 키"""
    pass


class ParameterEditError(ValidationError):
    """파라미터 편집(추가/수정/삭제) 관련 오류"""
    pass


class RecordNotFoundError(QCLabError):
    """기록 ID로 기록을 찾을 수 없음"""
    pass


class NetworkError(QCLabError):
    """네트워크 관련 오류"""
    pass
