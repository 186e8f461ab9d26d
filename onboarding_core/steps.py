"""
Job steps that carry a selected onboarding category.

Steps are looked up in an explicit registration table keyed by function name;
step data is validated with Pydantic when a step is created from it.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError, StepNotFoundError
from .utils.logger import get_logger

_STEP_REGISTRY: Dict[str, Type["BaseStep"]] = {}


class LoggerListener:
    """Listener that writes step output to a logger, the package logger by default."""

    def __init__(self, logger=None):
        self.logger = logger or get_logger()

    def println(self, line: str) -> None:
        self.logger.info(line)


class BaseStep(BaseModel, ABC):
    """
    A step a job can run with one selected category.

    Abstract: concrete steps set ``function_name`` and ``display_name`` and implement
    ``message``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    function_name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""

    category: str = Field(..., description="Selected onboarding category")

    @abstractmethod
    def message(self) -> str:
        """The line this step writes when it runs."""

    def run(self, listener=None) -> None:
        """
        Write the step's output line.

        Args:
            listener: Object with ``println(str)``, or a logger; defaults to the package logger
        """
        if listener is None:
            listener = LoggerListener()
        elif not hasattr(listener, "println"):
            listener = LoggerListener(listener)
        listener.println(self.message())

    @classmethod
    def fill_category_items(cls, configuration=None) -> List[Tuple[str, str]]:
        """Category choices for this step's form; empty without a configuration."""
        if configuration is None:
            return []
        return configuration.category_choices()


def register_step(step_class: Type[BaseStep]) -> Type[BaseStep]:
    """Class decorator adding a step to the registration table."""
    if not step_class.function_name:
        raise ValueError(f"{step_class.__name__} has no function_name")
    _STEP_REGISTRY[step_class.function_name] = step_class
    return step_class


def get_step_class(function_name: str) -> Type[BaseStep]:
    try:
        return _STEP_REGISTRY[function_name]
    except KeyError:
        raise StepNotFoundError(
            f"Step not found: function_name={function_name}", function_name=function_name
        ) from None


def create_step(function_name: str, data: Optional[Mapping[str, Any]] = None) -> BaseStep:
    """
    Build a registered step from submitted data.

    Raises:
        StepNotFoundError: If nothing is registered under ``function_name``
        ConfigurationError: If ``data`` does not fit the step
    """
    step_class = get_step_class(function_name)
    try:
        return step_class.model_validate(dict(data or {}))
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid data for step {function_name}", cause=e, function_name=function_name
        )


def registered_steps() -> Dict[str, str]:
    """Function name to display name of every registered step."""
    return {name: step_class.display_name for name, step_class in _STEP_REGISTRY.items()}


@register_step
class OnboardingStep(BaseStep):
    """Pipeline step."""

    function_name: ClassVar[str] = "onboardingStep"
    display_name: ClassVar[str] = "Onboarding Step"

    def message(self) -> str:
        return f"Executing My Task with category: {self.category}"


@register_step
class OnboardingTask(BaseStep):
    """Build task."""

    function_name: ClassVar[str] = "onboardingTask"
    display_name: ClassVar[str] = "Onboarding Task"

    def message(self) -> str:
        return f"Selected Category is {self.category}"
