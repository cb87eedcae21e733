"""
Umrah registration form validation.
Per-field rules, cross-field checks and the whole-form schema.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

from email_validator import EmailNotValidError, validate_email as check_email_syntax

from core.utils_datetime import add_months, calculate_age, get_today, parse_date_value
from domain.enums import Gender, MaritalStatus, PaymentMethod, Relationship
from services.booking_normalization import normalize_submission, strip_whitespace


logger = logging.getLogger(__name__)


class ValidationCategory(Enum):
    """Validation error categories, one per form section."""
    PERSONAL = "personal"
    ADDRESS = "address"
    HEALTH = "health"
    DOCUMENT = "document"
    CONTACT = "contact"
    EMERGENCY = "emergency"
    PACKAGE = "package"
    TERMS = "terms"


@dataclass
class ValidationError:
    """Represents a single violated constraint."""
    field: str
    message: str
    category: Optional[ValidationCategory] = None


@dataclass
class FormValidationResult:
    """Result of validating a whole form."""
    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.is_valid

    def add_error(self, error: ValidationError):
        """Add an error and mark as invalid."""
        self.errors.append(error)
        self.is_valid = False

    def get_error_messages(self) -> List[str]:
        """Get all error messages in field-declaration order."""
        return [e.message for e in self.errors]

    def get_field_errors(self) -> Dict[str, str]:
        """First error message per field."""
        field_errors: Dict[str, str] = {}
        for error in self.errors:
            field_errors.setdefault(error.field, error.message)
        return field_errors


# ============================================================================
# Patterns & Constants
# ============================================================================

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\.,'-]+$")
POSTAL_CODE_PATTERN = re.compile(r'^[0-9]{5,6}$')
NIK_PATTERN = re.compile(r'^[0-9]{16}$')
PASSPORT_PATTERN = re.compile(r'^[A-Z0-9]+$')
INDONESIAN_PHONE_PATTERN = re.compile(r'^(\+62|62|0)[89][0-9]{7,12}$')
PACKAGE_ID_PATTERN = re.compile(r'^[0-9]+$')

COMMON_EMAIL_DOMAINS = {
    'gmail.com',
    'yahoo.com',
    'outlook.com',
    'hotmail.com',
    'icloud.com',
}

MAX_AGE = 80
PASSPORT_MIN_VALIDITY_MONTHS = 6

TRUE_STRINGS = {'true', '1', 'on', 'yes'}

EMAIL_MAX_LENGTH = 255

# Older clients send the misspelled key
FIELD_ALIASES = {
    'marital_status': 'mariage_status',
}

BOOLEAN_FIELDS = (
    'specific_disease',
    'special_needs',
    'wheelchair',
    'has_performed_umrah',
    'has_performed_hajj',
    'terms_of_service',
)

DATE_FIELDS = (
    'register_date',
    'birth_date',
    'date_of_issue',
    'expiry_date',
)

ENUM_FIELDS = {
    'gender': Gender,
    'marital_status': MaritalStatus,
    'relationship': Relationship,
    'payment_method': PaymentMethod,
}

# Fields re-checked together when only one of them changes
FIELD_DEPENDENCIES = {
    'specific_disease': ('illness',),
    'illness': ('specific_disease',),
    'date_of_issue': ('expiry_date',),
    'expiry_date': ('date_of_issue',),
}


def as_bool(value: Any) -> bool:
    """Interpret checkbox values coming from JSON or HTML forms."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value) if isinstance(value, int) else False


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    return str(value)


def illness_required(data: Dict[str, Any]) -> bool:
    """Illness details are required (and shown) only with a declared specific disease."""
    return as_bool(data.get('specific_disease'))


# ============================================================================
# Text Rules
# ============================================================================

@dataclass(frozen=True)
class TextRule:
    """Length, character-set and word-count constraints for a free-text field."""
    required_message: str
    min_length: int
    max_length: int
    min_message: str
    max_message: str
    pattern: Optional[re.Pattern] = None
    pattern_message: Optional[str] = None
    min_words: int = 0
    words_message: Optional[str] = None

    def check(self, value: Any) -> Optional[str]:
        text = _as_text(value).strip()
        if not text:
            return self.required_message
        if len(text) < self.min_length:
            return self.min_message
        if len(text) > self.max_length:
            return self.max_message
        if self.pattern is not None and not self.pattern.match(text):
            return self.pattern_message
        if self.min_words and len(text.split()) < self.min_words:
            return self.words_message
        return None


NAME_RULE = TextRule(
    required_message='Nama wajib diisi',
    min_length=3,
    max_length=100,
    min_message='Nama minimal 3 karakter',
    max_message='Nama maksimal 100 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama hanya boleh mengandung huruf, spasi, titik, koma, apostrof, dan tanda hubung',
    min_words=2,
    words_message='Nama harus terdiri dari minimal 2 kata',
)

FATHER_NAME_RULE = TextRule(
    required_message='Nama ayah wajib diisi',
    min_length=3,
    max_length=100,
    min_message='Nama ayah minimal 3 karakter',
    max_message='Nama ayah maksimal 100 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama ayah hanya boleh mengandung huruf dan tanda baca umum',
)

MOTHER_NAME_RULE = TextRule(
    required_message='Nama ibu wajib diisi',
    min_length=3,
    max_length=100,
    min_message='Nama ibu minimal 3 karakter',
    max_message='Nama ibu maksimal 100 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama ibu hanya boleh mengandung huruf dan tanda baca umum',
)

EMERGENCY_CONTACT_NAME_RULE = TextRule(
    required_message='Nama kontak darurat wajib diisi',
    min_length=3,
    max_length=100,
    min_message='Nama kontak darurat minimal 3 karakter',
    max_message='Nama kontak darurat maksimal 100 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama kontak darurat hanya boleh mengandung huruf dan tanda baca umum',
)

PLACE_OF_BIRTH_RULE = TextRule(
    required_message='Tempat lahir wajib diisi',
    min_length=2,
    max_length=50,
    min_message='Tempat lahir minimal 2 karakter',
    max_message='Tempat lahir maksimal 50 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Tempat lahir hanya boleh mengandung huruf dan tanda baca umum',
)

CITY_RULE = TextRule(
    required_message='Kota wajib diisi',
    min_length=2,
    max_length=50,
    min_message='Kota minimal 2 karakter',
    max_message='Kota maksimal 50 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama kota tidak valid',
)

PROVINCE_RULE = TextRule(
    required_message='Provinsi wajib diisi',
    min_length=2,
    max_length=50,
    min_message='Provinsi minimal 2 karakter',
    max_message='Provinsi maksimal 50 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Nama provinsi tidak valid',
)

PLACE_OF_ISSUE_RULE = TextRule(
    required_message='Tempat terbit paspor wajib diisi',
    min_length=2,
    max_length=50,
    min_message='Tempat terbit paspor minimal 2 karakter',
    max_message='Tempat terbit paspor maksimal 50 karakter',
    pattern=NAME_PATTERN,
    pattern_message='Tempat terbit paspor tidak valid',
)

ADDRESS_RULE = TextRule(
    required_message='Alamat wajib diisi',
    min_length=10,
    max_length=300,
    min_message='Alamat lengkap minimal 10 karakter',
    max_message='Alamat maksimal 300 karakter',
    min_words=3,
    words_message='Alamat harus lebih detail dan jelas',
)

OCCUPATION_RULE = TextRule(
    required_message='Pekerjaan tidak boleh kosong',
    min_length=2,
    max_length=100,
    min_message='Pekerjaan minimal 2 karakter',
    max_message='Pekerjaan maksimal 100 karakter',
)


# ============================================================================
# Field Validators
# Each takes (value, whole-form snapshot) and returns an error message or None.
# ============================================================================

def validate_name(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return NAME_RULE.check(value)


def validate_father_name(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return FATHER_NAME_RULE.check(value)


def validate_mother_name(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return MOTHER_NAME_RULE.check(value)


def validate_emergency_contact_name(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return EMERGENCY_CONTACT_NAME_RULE.check(value)


def validate_place_of_birth(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return PLACE_OF_BIRTH_RULE.check(value)


def validate_city(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return CITY_RULE.check(value)


def validate_province(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return PROVINCE_RULE.check(value)


def validate_place_of_issue(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return PLACE_OF_ISSUE_RULE.check(value)


def validate_address(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return ADDRESS_RULE.check(value)


def validate_occupation(value: Any, data: Dict[str, Any]) -> Optional[str]:
    return OCCUPATION_RULE.check(value)


def validate_postal_code(value: Any, data: Dict[str, Any]) -> Optional[str]:
    text = _as_text(value).strip()
    if not text:
        return 'Kode pos wajib diisi'
    if not POSTAL_CODE_PATTERN.match(text):
        return 'Kode pos harus terdiri dari 5-6 digit angka'
    return None


def validate_nik_number(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """16 digits, and not one digit repeated (a typical fake ID)."""
    text = _as_text(value).strip()
    if not text:
        return 'NIK wajib diisi'
    if not NIK_PATTERN.match(text):
        return 'NIK harus terdiri dari 16 digit angka'
    if len(set(text)) == 1:
        return 'NIK tidak valid - tidak boleh semua digit sama'
    return None


def validate_passport_number(value: Any, data: Dict[str, Any]) -> Optional[str]:
    text = _as_text(value).strip().upper()
    if not text:
        return 'Nomor paspor wajib diisi'
    if len(text) < 6 or len(text) > 15:
        return 'Nomor paspor harus 6-15 karakter'
    if not PASSPORT_PATTERN.match(text):
        return 'Nomor paspor hanya boleh mengandung huruf kapital dan angka'
    return None


def _parse_required_date(
    value: Any,
    required_message: str,
    invalid_message: str
) -> Tuple[Optional[date], Optional[str]]:
    """Parse a required date, returning (date, None) or (None, error message)."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, required_message
    parsed = parse_date_value(value)
    if parsed is None:
        return None, invalid_message
    return parsed, None


def validate_register_date(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """Registration date may be today or later (day granularity)."""
    register_date, error = _parse_required_date(
        value,
        'Tanggal pendaftaran wajib diisi',
        'Format tanggal pendaftaran tidak valid',
    )
    if error:
        return error
    if register_date < get_today():
        return 'Tanggal pendaftaran tidak boleh di masa lalu'
    return None


def validate_birth_date(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """Birth date strictly before today, applicant at most 80 years old."""
    birth_date, error = _parse_required_date(
        value,
        'Tanggal lahir wajib diisi',
        'Format tanggal lahir tidak valid',
    )
    if error:
        return error
    today = get_today()
    if birth_date >= today:
        return 'Tanggal lahir tidak boleh di masa depan'
    if calculate_age(birth_date, today) > MAX_AGE:
        return f'Usia maksimal untuk umroh adalah {MAX_AGE} tahun'
    return None


def validate_date_of_issue(value: Any, data: Dict[str, Any]) -> Optional[str]:
    date_of_issue, error = _parse_required_date(
        value,
        'Tanggal terbit paspor wajib diisi',
        'Format tanggal terbit paspor tidak valid',
    )
    if error:
        return error
    if date_of_issue > get_today():
        return 'Tanggal terbit paspor tidak boleh di masa depan'
    return None


def validate_expiry_date(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """
    Passport must stay valid for more than six months from today
    and expire after its issue date. The first failing check is reported.
    """
    expiry_date, error = _parse_required_date(
        value,
        'Tanggal berakhir paspor wajib diisi',
        'Format tanggal berakhir paspor tidak valid',
    )
    if error:
        return error

    minimum_validity = add_months(get_today(), PASSPORT_MIN_VALIDITY_MONTHS)
    if expiry_date <= minimum_validity:
        return 'Paspor harus berlaku minimal 6 bulan dari sekarang'

    date_of_issue = parse_date_value(data.get('date_of_issue'))
    if date_of_issue is not None and expiry_date <= date_of_issue:
        return 'Tanggal berakhir harus setelah tanggal terbit'
    return None


def is_valid_indonesian_phone(value: Any) -> bool:
    """Indonesian mobile number: +62/62/0 prefix, then 8 or 9, then 7-12 digits."""
    return bool(INDONESIAN_PHONE_PATTERN.match(strip_whitespace(_as_text(value))))


def validate_phone_number(value: Any, data: Dict[str, Any]) -> Optional[str]:
    if not _as_text(value).strip():
        return 'Nomor telepon wajib diisi'
    if not is_valid_indonesian_phone(value):
        return 'Format nomor telepon tidak valid (contoh: 08123456789 atau +628123456789)'
    return None


def validate_whatsapp_number(value: Any, data: Dict[str, Any]) -> Optional[str]:
    if not _as_text(value).strip():
        return 'Nomor WhatsApp wajib diisi'
    if not is_valid_indonesian_phone(value):
        return 'Format nomor WhatsApp tidak valid (contoh: 08123456789 atau +628123456789)'
    return None


def validate_emergency_contact_phone(value: Any, data: Dict[str, Any]) -> Optional[str]:
    if not _as_text(value).strip():
        return 'Nomor telepon kontak darurat wajib diisi'
    if not is_valid_indonesian_phone(value):
        return 'Format nomor telepon kontak darurat tidak valid'
    return None


def validate_email(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """
    Email syntax plus a soft domain plausibility check: a domain without
    a dot is only accepted when it is one of the common providers.
    """
    text = _as_text(value).strip().lower()
    if not text:
        return 'Email wajib diisi'
    if len(text) > EMAIL_MAX_LENGTH:
        return f'Email maksimal {EMAIL_MAX_LENGTH} karakter'
    try:
        checked = check_email_syntax(
            text,
            check_deliverability=False,
            globally_deliverable=False,
            allow_smtputf8=False,
        )
    except EmailNotValidError:
        return 'Format email tidak valid'

    domain = checked.domain
    if domain not in COMMON_EMAIL_DOMAINS and '.' not in domain:
        return 'Gunakan email dengan domain yang valid'
    return None


def _enum_validator(enum_cls, message: str) -> Callable[[Any, Dict[str, Any]], Optional[str]]:
    allowed = {member.value for member in enum_cls}

    def validate(value: Any, data: Dict[str, Any]) -> Optional[str]:
        if isinstance(value, Enum):
            value = value.value
        if not isinstance(value, str) or value not in allowed:
            return message
        return None

    validate.__name__ = f"validate_{enum_cls.__name__.lower()}"
    return validate


validate_gender = _enum_validator(Gender, 'Jenis kelamin wajib dipilih')
validate_marital_status = _enum_validator(MaritalStatus, 'Status pernikahan wajib dipilih')
validate_relationship = _enum_validator(Relationship, 'Hubungan dengan kontak darurat wajib dipilih')
validate_payment_method = _enum_validator(PaymentMethod, 'Metode pembayaran wajib dipilih')


def validate_umrah_package(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """The package is referenced by its catalog id."""
    text = _as_text(value).strip()
    if not text:
        return 'Paket umroh harus dipilih'
    if isinstance(value, bool) or not PACKAGE_ID_PATTERN.match(text):
        return 'Paket umroh tidak valid'
    return None


def validate_illness(value: Any, data: Dict[str, Any]) -> Optional[str]:
    if not illness_required(data):
        return None
    if not isinstance(value, str) or not value.strip():
        return 'Detail penyakit wajib diisi jika memiliki penyakit khusus'
    return None


def validate_terms_of_service(value: Any, data: Dict[str, Any]) -> Optional[str]:
    """Consent must be an explicit true, not just any truthy checkbox value."""
    accepted = value is True or (isinstance(value, str) and value.strip().lower() == 'true')
    if not accepted:
        return 'Anda harus menyetujui syarat dan ketentuan'
    return None


FieldValidator = Callable[[Any, Dict[str, Any]], Optional[str]]

# Declaration order = order of reported errors
FIELD_VALIDATORS: List[Tuple[str, ValidationCategory, FieldValidator]] = [
    # Personal Information
    ('name', ValidationCategory.PERSONAL, validate_name),
    ('register_date', ValidationCategory.PERSONAL, validate_register_date),
    ('gender', ValidationCategory.PERSONAL, validate_gender),
    ('place_of_birth', ValidationCategory.PERSONAL, validate_place_of_birth),
    ('birth_date', ValidationCategory.PERSONAL, validate_birth_date),
    ('father_name', ValidationCategory.PERSONAL, validate_father_name),
    ('mother_name', ValidationCategory.PERSONAL, validate_mother_name),
    ('marital_status', ValidationCategory.PERSONAL, validate_marital_status),
    # Address Information
    ('address', ValidationCategory.ADDRESS, validate_address),
    ('city', ValidationCategory.ADDRESS, validate_city),
    ('province', ValidationCategory.ADDRESS, validate_province),
    ('postal_code', ValidationCategory.ADDRESS, validate_postal_code),
    ('occupation', ValidationCategory.ADDRESS, validate_occupation),
    # Health Information
    ('illness', ValidationCategory.HEALTH, validate_illness),
    # Document Information
    ('nik_number', ValidationCategory.DOCUMENT, validate_nik_number),
    ('passport_number', ValidationCategory.DOCUMENT, validate_passport_number),
    ('date_of_issue', ValidationCategory.DOCUMENT, validate_date_of_issue),
    ('expiry_date', ValidationCategory.DOCUMENT, validate_expiry_date),
    ('place_of_issue', ValidationCategory.DOCUMENT, validate_place_of_issue),
    # Contact Information
    ('phone_number', ValidationCategory.CONTACT, validate_phone_number),
    ('whatsapp_number', ValidationCategory.CONTACT, validate_whatsapp_number),
    ('email', ValidationCategory.CONTACT, validate_email),
    # Emergency Contact
    ('emergency_contact_name', ValidationCategory.EMERGENCY, validate_emergency_contact_name),
    ('relationship', ValidationCategory.EMERGENCY, validate_relationship),
    ('emergency_contact_phone', ValidationCategory.EMERGENCY, validate_emergency_contact_phone),
    # Package & Payment
    ('umrah_package', ValidationCategory.PACKAGE, validate_umrah_package),
    ('payment_method', ValidationCategory.PACKAGE, validate_payment_method),
    # Terms
    ('terms_of_service', ValidationCategory.TERMS, validate_terms_of_service),
]

FORM_FIELDS: Tuple[str, ...] = tuple(
    [name for name, _, _ in FIELD_VALIDATORS]
    + [name for name in BOOLEAN_FIELDS if name not in {f for f, _, _ in FIELD_VALIDATORS}]
)


# ============================================================================
# Form Schema
# ============================================================================

def _apply_aliases(data: Dict[str, Any]) -> Dict[str, Any]:
    snapshot = dict(data)
    for canonical, alias in FIELD_ALIASES.items():
        if canonical not in snapshot and alias in snapshot:
            snapshot[canonical] = snapshot[alias]
    return snapshot


def expand_dependent_fields(fields: Iterable[str]) -> Set[str]:
    """Add the fields whose rules read the given ones."""
    expanded = set(fields)
    for name in list(expanded):
        expanded.update(FIELD_DEPENDENCIES.get(name, ()))
    return expanded


def coerce_form_data(data: Dict[str, Any], fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
    """
    Convert validated raw values to their stored types.

    Dates become ``date`` objects, checkboxes become booleans, enum
    members become their values and the package becomes an int id.
    Unknown keys are dropped.
    """
    wanted = set(fields) if fields is not None else set(FORM_FIELDS)
    coerced: Dict[str, Any] = {}

    for name in FORM_FIELDS:
        if name not in wanted:
            continue
        if fields is not None and name not in data:
            continue
        value = data.get(name)

        if name in BOOLEAN_FIELDS:
            coerced[name] = as_bool(value)
        elif name in DATE_FIELDS:
            coerced[name] = parse_date_value(value)
        elif name in ENUM_FIELDS:
            coerced[name] = value.value if isinstance(value, Enum) else value
        elif name == 'umrah_package':
            coerced[name] = int(_as_text(value).strip())
        elif name == 'illness':
            coerced[name] = value if isinstance(value, str) else None
        else:
            coerced[name] = _as_text(value)

    return coerced


def validate_booking_form(
    data: Dict[str, Any],
    fields: Optional[Iterable[str]] = None
) -> FormValidationResult:
    """
    Validate a registration form.

    Every field is checked (no short-circuit) so the caller receives the
    complete error list in one pass. Unknown keys are ignored. On success
    ``result.data`` holds the coerced and normalized form.

    Args:
        data: Raw form data
        fields: Restrict validation to these fields (partial update); the
            rest of ``data`` still serves as sibling context

    Returns:
        FormValidationResult
    """
    snapshot = _apply_aliases(data or {})
    selected = expand_dependent_fields(fields) if fields is not None else None
    result = FormValidationResult()

    for name, category, validator in FIELD_VALIDATORS:
        if selected is not None and name not in selected:
            continue
        message = validator(snapshot.get(name), snapshot)
        if message:
            result.add_error(ValidationError(field=name, message=message, category=category))

    if not result.is_valid:
        logger.info(f"Form validation failed with {len(result.errors)} error(s)")
        return result

    result.data = normalize_submission(coerce_form_data(snapshot, selected))
    return result
