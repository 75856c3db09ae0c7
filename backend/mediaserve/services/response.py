from fastapi import Response, status

from mediaserve.services.policy import Disposition


def assemble_response(
    data: bytes,
    content_type: str,
    disposition: Disposition,
    cache_control: str,
) -> Response:
    return Response(
        content=data,
        status_code=status.HTTP_200_OK,
        media_type=content_type,
        headers={
            "Content-Disposition": disposition,
            "Cache-Control": cache_control,
        },
    )
