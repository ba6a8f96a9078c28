from fastapi import Header, HTTPException, status


async def get_current_user_id(
    user_id: str | None = Header(default=None, alias="X-User-Id"),
) -> str:
    """Identidad del llamador; la autenticación real vive fuera de este servicio."""
    if not user_id or not user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    return user_id.strip()
