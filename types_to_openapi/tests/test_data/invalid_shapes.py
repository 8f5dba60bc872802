"""API shapes that break the operation contract."""

from typing import Annotated, Literal, TypedDict


class Pong(TypedDict):
    message: str


OkResponses = TypedDict("OkResponses", {"200": Annotated[Pong, "Pong"]})

UnknownStatusResponses = TypedDict("UnknownStatusResponses", {"299": Pong})


class MissingResponses(TypedDict):
    path: Literal["/ping"]
    method: Literal["GET"]


class IgnoredMissingResponses(TypedDict):
    """@ignore"""

    path: Literal["/ping"]
    method: Literal["GET"]


class UnknownMethod(TypedDict):
    path: Literal["/ping"]
    method: Literal["FETCH"]
    responses: OkResponses


class PathNotLiteral(TypedDict):
    path: str
    method: Literal["GET"]
    responses: OkResponses


class UnknownStatus(TypedDict):
    path: Literal["/ping"]
    method: Literal["GET"]
    responses: UnknownStatusResponses


class ListParams(TypedDict):
    path: Literal["/ping/{id}"]
    method: Literal["GET"]
    params: list[str]
    responses: OkResponses
