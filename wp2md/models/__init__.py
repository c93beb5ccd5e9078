from .records import SCRAPED_IMAGE_ID, Gallery, Image, Post, Translation

__all__ = ["SCRAPED_IMAGE_ID", "Gallery", "Image", "Post", "Translation"]
