import json
import re
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from motiva_backend.interface.base import utc_now_iso

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# questions answered with "yes" that require medical clearance
RISK_QUESTIONS = ("medical_conditions", "medications", "surgery", "family_history", "current_pain", "past_injuries")

class ParqSubmission(BaseModel):
    """PAR-Q health questionnaire as posted by the intake form"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    first_name: Optional[str] = Field(None, alias="firstName")
    last_name: Optional[str] = Field(None, alias="lastName")
    email: Optional[str] = None
    phone: Optional[str] = None
    date_of_birth: Optional[str] = Field(None, alias="dateOfBirth")
    has_heart_condition: Any = Field(None, alias="hasHeartCondition")
    currently_taking_medication: Any = Field(None, alias="currentlyTakingMedication")
    member_id: Optional[str] = Field(None, alias="memberId")
    medical_conditions: Optional[str] = Field(None, alias="medicalConditions")
    medications: Optional[str] = None
    surgery: Optional[str] = None
    family_history: Optional[str] = Field(None, alias="familyHistory")
    current_pain: Optional[str] = Field(None, alias="currentPain")
    past_injuries: Optional[str] = Field(None, alias="pastInjuries")
    red_flag_symptoms: Optional[List[str]] = Field(None, alias="redFlagSymptoms")
    form_data: Optional[str] = Field(None, alias="formData")
    assigned_trainer_id: Optional[str] = Field(None, alias="assignedTrainerId")

    def validation_error(self) -> Optional[str]:
        if not self.first_name or not self.last_name or not self.email:
            return "Missing required fields: firstName, lastName, or email"
        if not EMAIL_PATTERN.match(self.email):
            return "Invalid email format"
        return None

    @property
    def flags_yes(self) -> bool:
        if self.has_heart_condition or self.currently_taking_medication:
            return True
        if any(getattr(self, question) == "yes" for question in RISK_QUESTIONS):
            return True
        return bool(self.red_flag_symptoms) and "none" not in self.red_flag_symptoms

    def to_record(self, default_trainer_id: str) -> Dict[str, Any]:
        answers = self.form_data or json.dumps(self.model_dump(by_alias=True, exclude_none=True), indent=2)
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "clientName": f"{self.first_name} {self.last_name}",
            "dateOfBirth": self.date_of_birth,
            "hasHeartCondition": bool(self.has_heart_condition),
            "currentlyTakingMedication": bool(self.currently_taking_medication),
            "memberId": self.member_id,
            "submissionDate": utc_now_iso(),
            "answers": answers,
            "flagsYes": self.flags_yes,
            "status": "New",
            "assignedTrainerId": self.assigned_trainer_id or default_trainer_id,
            "notes": "",
        }
