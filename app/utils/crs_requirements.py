"""
Utility to determine which questionnaire answers a CRS calculation still needs.
"""

from typing import Dict, List, Any, Optional, Callable

from app.scoring.crs_profile import MaritalStatus, normalize_choice


LANGUAGE_SKILLS = ["speak", "listen", "read", "write"]


class CRSFieldRequirement:
    """Represents a questionnaire field needed for CRS calculation"""
    def __init__(
        self,
        field_name: str,
        field_type: str,  # "required", "optional", "conditional"
        question: str,
        description: str,
        current_value: Any = None,
        is_present: bool = False,
        applies: bool = True,
    ):
        self.field_name = field_name
        self.field_type = field_type
        self.question = question
        self.description = description
        self.current_value = current_value
        self.is_present = is_present
        self.applies = applies

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_name": self.field_name,
            "field_type": self.field_type,
            "question": self.question,
            "description": self.description,
            "applies": self.applies,
            "is_present": self.is_present,
            "current_value": self.current_value,
        }


def _has_value(value: Any) -> bool:
    return value is not None and value != ""


def _has_language(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    return any(value.get(skill) is not None for skill in LANGUAGE_SKILLS)


def _is_partnered(profile_data: Dict[str, Any]) -> bool:
    status = normalize_choice(profile_data.get("marital_status"))
    return status in (MaritalStatus.MARRIED.value, MaritalStatus.COMMON_LAW.value)


def _spouse(profile_data: Dict[str, Any]) -> Dict[str, Any]:
    spouse = profile_data.get("spouse")
    return spouse if isinstance(spouse, dict) else {}


def _field(
    data: Dict[str, Any],
    key: str,
    field_type: str,
    question: str,
    description: str,
    check: Callable[[Any], bool] = _has_value,
    applies: bool = True,
    field_name: Optional[str] = None,
) -> CRSFieldRequirement:
    value = data.get(key)
    return CRSFieldRequirement(
        field_name or key,
        field_type,
        question,
        description,
        value,
        check(value),
        applies,
    )


def analyze_crs_requirements(profile_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Analyze partial questionnaire answers to see what CRS calculation still needs.

    Spouse questions are "conditional": they only apply to a married or
    common-law applicant, and the spouse's own factors only when the spouse
    accompanies and is not already a citizen or permanent resident.

    Returns a dictionary with:
    - available_fields: fields that are present
    - missing_required: required fields that are missing
    - missing_optional: optional fields that could improve score
    - missing_conditional: applicable spouse fields that are missing
    - can_calculate: whether minimum requirements are met
    - is_complete: whether every applicable field is answered
    - requirements: detailed list of all field requirements
    """
    spouse = _spouse(profile_data)
    partnered = _is_partnered(profile_data)
    spouse_domestic = bool(spouse.get("is_domestic_citizen_or_resident"))
    spouse_counts = partnered and not spouse_domestic and bool(spouse.get("accompanying"))

    required_fields = [
        _field(profile_data, "age", "required",
               "How old are you?",
               "Maximum points are awarded between 20-29 and drop to 0 at age 45."),
        _field(profile_data, "education", "required",
               "What is your highest level of education?",
               "Canadian credential or foreign credential with an ECA."),
        _field(profile_data, "english", "required",
               "English language results (CLB)",
               "CLB 9 in all abilities unlocks the largest transferability bonuses.",
               check=_has_language),
    ]

    optional_fields = [
        _field(profile_data, "marital_status", "optional",
               "What is your marital status?",
               "A non-Canadian accompanying spouse lowers core points to allow for their contribution."),
        _field(profile_data, "domestic_education", "optional",
               "Did you obtain any of this education in Canada?",
               "1-2 year credentials add 15 points, 3+ year credentials add 30."),
        _field(profile_data, "french", "optional",
               "French language results (NCLC)",
               "NCLC 7 in all four abilities adds 25 or 50 points.",
               check=_has_language),
        _field(profile_data, "work_years_domestic", "optional",
               "Years of skilled work experience in Canada?",
               "Must be paid work in TEER 0, 1, 2 or 3."),
        _field(profile_data, "work_years_foreign", "optional",
               "Years of skilled work experience outside Canada?",
               "Adds transferability points combined with strong language results."),
        _field(profile_data, "has_trade_certificate", "optional",
               "Do you have a certificate of qualification in a trade?",
               "Issued by a Canadian province or territory."),
        _field(profile_data, "has_provincial_nomination", "optional",
               "Do you have a provincial nomination?",
               "Adds 600 points."),
        _field(profile_data, "has_sibling_domestic", "optional",
               "Do you have a sibling in Canada (citizen or PR)?",
               "Must be 18+ and living in Canada."),
        _field(profile_data, "occupation_category", "optional",
               "Primary occupation category",
               "Used for category-based selection rounds."),
    ]

    conditional_fields = [
        _field(spouse, "is_domestic_citizen_or_resident", "conditional",
               "Is your spouse or partner a Canadian citizen or permanent resident?",
               "If so, you are scored as if single.",
               applies=partnered,
               field_name="spouse.is_domestic_citizen_or_resident"),
        _field(spouse, "accompanying", "conditional",
               "Will your spouse or partner come with you to Canada?",
               "If not, you are scored as if single.",
               applies=partnered and not spouse_domestic,
               field_name="spouse.accompanying"),
        _field(spouse, "education", "conditional",
               "What is your spouse's education level?",
               "Contributes up to 10 points.",
               applies=spouse_counts,
               field_name="spouse.education"),
        _field(spouse, "work_years_domestic", "conditional",
               "Years of spouse's skilled work in Canada?",
               "Contributes up to 10 points.",
               applies=spouse_counts,
               field_name="spouse.work_years_domestic"),
        _field(spouse, "english", "conditional",
               "Spouse's English results (CLB)",
               "Contributes up to 20 points.",
               check=_has_language,
               applies=spouse_counts,
               field_name="spouse.english"),
    ]

    requirements = []
    available_fields: List[str] = []
    missing_required: List[str] = []
    missing_optional: List[str] = []
    missing_conditional: List[str] = []

    buckets = {
        "required": missing_required,
        "optional": missing_optional,
        "conditional": missing_conditional,
    }
    for req in required_fields + optional_fields + conditional_fields:
        requirements.append(req.to_dict())
        if not req.applies:
            continue
        if req.is_present:
            available_fields.append(req.field_name)
        else:
            buckets[req.field_type].append(req.field_name)

    can_calculate = len(missing_required) == 0
    is_complete = can_calculate and not missing_optional and not missing_conditional

    return {
        "can_calculate": can_calculate,
        "is_complete": is_complete,
        "available_fields": available_fields,
        "missing_required": missing_required,
        "missing_optional": missing_optional,
        "missing_conditional": missing_conditional,
        "requirements": requirements,
    }
