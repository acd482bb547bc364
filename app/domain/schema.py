# app/domain/schema.py
# Nomes de atributos dos documentos. Escrita (repositórios) e consulta (query
# builder) referenciam só estas constantes.

ID = "id"
OWNER = "owner"
CREATED_AT = "createdAt"
UPDATED_AT = "updatedAt"

# videos
TITLE = "title"
DESCRIPTION = "description"
THUMBNAIL = "thumbnail"
DURATION = "duration"
IS_PUBLISHED = "isPublished"

# sombras minúsculas para busca case-insensitive (nunca expostas)
TITLE_SEARCH = "titleSearch"
DESCRIPTION_SEARCH = "descriptionSearch"
SEARCH_SHADOWS = {TITLE: TITLE_SEARCH, DESCRIPTION: DESCRIPTION_SEARCH}

SORTABLE_VIDEO_FIELDS = frozenset({TITLE, DESCRIPTION, DURATION, CREATED_AT, UPDATED_AT, IS_PUBLISHED})

# comments
CONTENT = "content"
VIDEO = "video"

# projeção fixa do dono no join de comentários
OWNER_SUMMARY_FIELDS = ("username", "fullName", "avatar")
