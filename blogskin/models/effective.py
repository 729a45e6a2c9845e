"""Effective skin: the single configuration that wins for a render pass."""

from typing import Dict, Union

from pydantic import BaseModel, Field
from typing_extensions import Annotated, Literal

from .skin import LayoutConfig


class TemplatedSkin(BaseModel):
    """Sanitized fragments from an active (or previewed) custom skin.

    The ``use_default_*`` flags are passed through from the custom skin; when
    one is set the caller renders its own structural component for that
    region instead of the fragment.
    """

    mode: Literal["templated"] = "templated"
    header: str = ""
    content: str = ""
    sidebar: str = ""
    footer: str = ""
    css: str = ""
    use_default_header: bool = False
    use_default_sidebar: bool = False
    use_default_footer: bool = False
    # Still exposed so partially templated pages keep the skin's palette
    css_variables: Dict[str, str] = {}


class VariablesSkin(BaseModel):
    """Merged CSS variables and layout for the built-in components."""

    mode: Literal["variables"] = "variables"
    css_variables: Dict[str, str]
    layout_config: LayoutConfig


EffectiveSkin = Annotated[Union[TemplatedSkin, VariablesSkin], Field(discriminator="mode")]
