"""
Puzzle Gallery
==============

Lists puzzle images from the content store and resolves the one a player
picks before a session starts. The listing is fetched once per gallery and
reused for every lookup.
"""

from dataclasses import replace

from category_index import build_category_index
from content_models import DEFAULT_PUZZLE_IMAGE_ID, DEMO_PUZZLE_IMAGES, SUPPORTED_GRID_SIZES
from outcomes import NOT_FOUND, failure, success


class PuzzleGallery:
    def __init__(self, store):
        self.store = store
        self._images = None

    def list(self):
        if self._images is None:
            self._images = list(self.store.get_puzzle_list())
            print(f"[Cache] Loaded {len(self._images)} puzzle images")
        return list(self._images)

    def refresh(self):
        self._images = None
        return self.list()

    def categories(self):
        return build_category_index(self.list())

    def select(self, image_id, grid_size=None):
        """Find an image by id. Outcome value is the PuzzleImage, with grid_size applied if given."""
        for image in self.list():
            if image.id == str(image_id):
                if grid_size is not None and grid_size in SUPPORTED_GRID_SIZES:
                    image = replace(image, grid_size=grid_size)
                return success(image)
        return failure(NOT_FOUND, f"No puzzle image with id '{image_id}'")

    def resolve(self, image_id=None, grid_size=None):
        """
        Image to play: the gallery image when the id is known, otherwise the
        built-in demo image. Always succeeds.
        """
        if image_id:
            outcome = self.select(image_id, grid_size)
            if outcome.ok:
                return outcome
            print(f"[Jigsaw] Unknown image {image_id!r}, falling back to demo image")

        demo = DEMO_PUZZLE_IMAGES[0]
        for image in DEMO_PUZZLE_IMAGES:
            if image.id == str(image_id or DEFAULT_PUZZLE_IMAGE_ID):
                demo = image
        if grid_size is not None and grid_size in SUPPORTED_GRID_SIZES:
            demo = replace(demo, grid_size=grid_size)
        return success(demo)
