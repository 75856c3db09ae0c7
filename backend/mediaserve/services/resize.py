"""Resolution of resize query parameters into concrete target dimensions.

Query parameters overlap: ``size``, ``max_side``, ``width`` and ``height``
may all be present at once. Precedence is the order of ``RESIZE_RULES``;
the first rule that returns dimensions wins and later rules are never
consulted. No rule ever exceeds the source dimensions. The ``dpr``
multiplier is applied afterwards and is the only way to upscale.
"""

from collections.abc import Callable

from mediaserve.schemas import ResizeRequest, TargetDimensions

ResizeRule = Callable[[ResizeRequest, int, int], tuple[int, int] | None]


def size_rule(request: ResizeRequest, width: int, height: int) -> tuple[int, int] | None:
    if request.size is None:
        return None
    side = min(request.size, min(width, height))
    return side, side


def max_side_rule(request: ResizeRequest, width: int, height: int) -> tuple[int, int] | None:
    if request.max_side is None:
        return None
    if height >= width:
        h = min(height, request.max_side)
        return width * h // height, h
    w = min(width, request.max_side)
    return w, height * w // width


def width_and_height_rule(
    request: ResizeRequest, width: int, height: int
) -> tuple[int, int] | None:
    if request.width is None or request.height is None:
        return None
    return min(width, request.width), min(height, request.height)


def width_rule(request: ResizeRequest, width: int, height: int) -> tuple[int, int] | None:
    if request.width is None:
        return None
    w = min(width, request.width)
    return w, round(w * height / width)


def height_rule(request: ResizeRequest, width: int, height: int) -> tuple[int, int] | None:
    if request.height is None:
        return None
    h = min(height, request.height)
    return round(h * width / height), h


RESIZE_RULES: tuple[ResizeRule, ...] = (
    size_rule,
    max_side_rule,
    width_and_height_rule,
    width_rule,
    height_rule,
)


def apply_dpr(width: int, height: int, dpr: float | None) -> TargetDimensions:
    scale = 1.0 if dpr is None else dpr
    return TargetDimensions(
        width=max(1, int(width * scale)),
        height=max(1, int(height * scale)),
    )


def resolve_target_dimensions(
    request: ResizeRequest, width: int, height: int
) -> TargetDimensions | None:
    """Return the output box for ``request`` against a ``width`` x ``height`` source.

    ``None`` means no resize was asked for and the original should be served.
    """
    for rule in RESIZE_RULES:
        selected = rule(request, width, height)
        if selected is not None:
            return apply_dpr(selected[0], selected[1], request.dpr)
    return None
