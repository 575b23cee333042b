from gcontacts_feed.models.api.feed_request import FeedRequest

__all__ = ["FeedRequest"]
