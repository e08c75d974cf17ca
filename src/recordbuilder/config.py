"""
Generator configuration.

Naming and policy knobs shared by the pipeline and its hosts.
"""

import keyword

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeneratorConfig(BaseModel):
    """
    Settings for one run of the builder generator.

    Attributes:
        builder_suffix: Appended to the record name to name the builder class
        factory_name: Name of the zero-argument factory added to the record
        finalizer_name: Name of the builder method that constructs the record
        wrapper_name: Unqualified name recognized as the optional wrapper
        activation_name: Decorator name that requests a builder
        collect_missing: Report every missing required field instead of the first
    """

    model_config = ConfigDict(frozen=True)

    builder_suffix: str = Field(default="Builder", min_length=1)
    factory_name: str = Field(default="builder")
    finalizer_name: str = Field(default="build")
    wrapper_name: str = Field(default="Optional")
    activation_name: str = Field(default="derive_builder")
    collect_missing: bool = Field(default=False)

    @field_validator("factory_name", "finalizer_name", "wrapper_name", "activation_name")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"{value!r} is not a valid Python identifier")
        return value

    @field_validator("builder_suffix")
    @classmethod
    def _check_suffix(cls, value: str) -> str:
        if not ("A" + value).isidentifier():
            raise ValueError(f"{value!r} cannot be used as a class name suffix")
        return value

    def builder_name(self, record_name: str) -> str:
        """Name of the builder class generated for a record."""
        return f"{record_name}{self.builder_suffix}"


DEFAULT_CONFIG = GeneratorConfig()
