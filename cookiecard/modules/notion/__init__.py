from cookiecard.modules.notion.catalog import list_databases, list_property_names
from cookiecard.modules.notion.client import NotionClient, NotionRequestError

__all__ = ["NotionClient", "NotionRequestError", "list_databases", "list_property_names"]
