from taggable.domain.usecase.tags.queries import TagQueries

__all__ = ["TagQueries"]
