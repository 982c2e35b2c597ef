"""
Producer for content (posts and pages) changes
"""

from auditlog.core.producer import Producer


class PostLogger(Producer):
    """Logs creation and modification of posts and pages"""

    slug = "PostLogger"

    def get_info(self) -> dict:
        return {
            "name": "Post Logger",
            "description": "Logs the creation and modification of posts and pages",
            "messages": {
                "post_created": 'Created {post_type} "{post_title}"',
                "post_updated": 'Updated {post_type} "{post_title}"',
                "post_restored": 'Restored {post_type} "{post_title}" from trash',
                "post_deleted": 'Deleted {post_type} "{post_title}"',
                "post_trashed": 'Moved {post_type} "{post_title}" to the trash',
            },
        }

    def post_updated(self, post_id: int, post_type: str, post_title: str, changes: dict | None = None):
        """Log an update; `changes` maps field name -> (previous, new)"""
        context = {
            "post_id": post_id,
            "post_type": post_type,
            "post_title": post_title,
        }
        for field_name, (previous, new) in (changes or {}).items():
            context[f"post_prev_{field_name}"] = previous
            context[f"post_new_{field_name}"] = new
        return self.info_message("post_updated", context)
