def content_detail_key(media_type: str, media_id: str) -> str:
    return f"catalog:{media_type}:{media_id}:detail"
