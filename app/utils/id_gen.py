import uuid


def new_id() -> str:
    """Id de vídeo/comentário; também prefixa as chaves dos assets no S3."""
    return str(uuid.uuid4())
