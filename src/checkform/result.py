"""Result type for a single evaluated check."""

from typing import Literal

from pydantic import BaseModel

FormName = Literal["comparison", "predicate", "args_predicate"]


class CheckResult(BaseModel):
    """Outcome of evaluating one check against a subject.

    Attributes:
    ----------
    check: str
        The check string as written at the call site
    form: FormName
        Which check form handled the check
    subject_source: str
        Source text of the subject expression
    passed: bool
        Whether the check held
    message: str | None
        Diagnostic message, only set when the check failed
    """

    check: str
    form: FormName
    subject_source: str
    passed: bool
    message: str | None = None

    def __repr__(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)

    def __bool__(self) -> bool:
        return self.passed
