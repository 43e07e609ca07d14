from pydantic import BaseModel, Field
from typing import Literal


class StagesConfig(BaseModel):
    whitespace: bool = True
    concat: bool = True
    variables: bool = True
    functions: bool = True
    base64: bool = True
    hex: bool = True
    escapes: bool = True
    formatting: bool = True


class RenameConfig(BaseModel):
    min_length: int = Field(default=10, ge=0)
    variable_prefix: str = "var_"
    function_prefix: str = "func_"


class FormattingConfig(BaseModel):
    indent_width: int = Field(default=2, ge=0)


class OutputConfig(BaseModel):
    filename: str = "deobfuscated.lua"
    report: bool = False
    report_suffix: str = ".techniques.yaml"


class DeobConfig(BaseModel):
    stages: StagesConfig = Field(default_factory=StagesConfig)
    rename: RenameConfig = Field(default_factory=RenameConfig)
    formatting: FormattingConfig = Field(default_factory=FormattingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
    log_format: Literal["text", "json"] = "text"
