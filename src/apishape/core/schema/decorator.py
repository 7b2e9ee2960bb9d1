from __future__ import annotations
from typing import Optional, Type

__all__ = ["shape", "shape_name"]


def shape_name(cls: Type) -> str:
    """Declared shape name, falling back to the class name."""
    return cls.__dict__.get("__shape_name__") or cls.__name__


def shape(
    _cls: Optional[Type] = None,
    *args,
    name: Optional[str] = None,
    description: str = "",
    title: str = "",
    forbid_unknown: bool = False,
    force_request_body: bool = False,
    force_json_body: bool = False,
):
    """
    Class decorator attaching shape-level metadata to a class of fields.

    Supported usages
    ----------------
    @shape
    class A: ...

    @shape()
    class B: ...

    @shape("Custom")          # positional shape name
    class C: ...

    @shape(name="Custom", forbid_unknown=True)
    class D: ...

    Parameters
    ----------
    name : Optional[str]
        Shape name used for component schema names (sanitized on registration).

    description, title : str
        Root schema annotations; the description is inherited by responses.

    forbid_unknown : bool
        Emit ``additionalProperties: false`` for the shape. On parameter
        shapes this marks undeclared parameters as forbidden.

    force_request_body : bool
        Allow a request body for GET/HEAD/DELETE/TRACE operations.

    force_json_body : bool
        Keep a JSON request body even when the shape carries form-data fields.

    Behavior
    --------
    - If both a positional name and 'name=' are provided, a ValueError is raised.
    - Undecorated classes are still valid shapes; their name is the class name.
    """
    positional_name: Optional[str] = None
    if _cls is not None and isinstance(_cls, str):
        positional_name = _cls
        _cls = None

    if positional_name is not None and name is not None:
        raise ValueError(
            "shape(): do not pass both a positional name and name= simultaneously."
        )
    effective_name = name or positional_name

    def _decorate(cls: Type) -> Type:
        cls.__shape_name__ = effective_name or cls.__name__
        cls.__shape_description__ = description
        cls.__shape_title__ = title
        cls.__shape_forbid_unknown__ = forbid_unknown
        cls.__force_request_body__ = force_request_body
        cls.__force_json_body__ = force_json_body
        return cls

    if _cls is not None:
        return _decorate(_cls)

    return _decorate
