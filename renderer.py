# renderer.py

import logging
import numpy as np
import pygame
import constants
from attributes import RenderAttributes

logger = logging.getLogger("particle_choreography")

NEAR_PLANE = 0.1


def scene_rotation(elapsed_time: float, progress: float):
    """
    Whole-field rotation (x, y) in radians. The field turns faster once the
    final formation is reached and swings half a turn over the full progress.
    """
    spin = 0.15 if progress >= 0.8 else 0.03
    return progress * 0.2, elapsed_time * spin + progress * np.pi


def falloff_sprite(radius: int) -> np.ndarray:
    """
    Brightness of a round point of the given pixel radius, as a (d, d) uint8
    array with d = 2 * radius + 1. Full at the centre, fading as
    (1 - 2 * distance / d) ** 1.5 to zero at the rim.
    """
    diameter = 2 * radius + 1
    offsets = np.arange(diameter) - radius
    distance = np.hypot(offsets[:, np.newaxis], offsets[np.newaxis, :]) / diameter
    strength = np.clip(1.0 - 2.0 * distance, 0.0, 1.0) ** 1.5
    return (strength * 255.0).astype(np.uint8)


def project_points(positions: np.ndarray, sizes: np.ndarray, rotation_x: float, rotation_y: float,
                   width: int = constants.WIDTH, height: int = constants.HEIGHT):
    """
    Rotates the field (y first, then x), then projects it through a
    perspective camera on the +z axis looking at the origin.

    Data Contract:
    - Inputs: positions (N, 3), sizes (N,), rotation angles in radians.
    - Outputs: (screen_xy (N, 2), point_diameters (N,), depths (N,), visible (N,) bool)
    - Invariants: Points at or behind the near plane are marked invisible and
      their other outputs are meaningless.
    """
    x, y, z = positions[:, 0], positions[:, 1], positions[:, 2]

    cos_y, sin_y = np.cos(rotation_y), np.sin(rotation_y)
    x, z = x * cos_y + z * sin_y, -x * sin_y + z * cos_y

    cos_x, sin_x = np.cos(rotation_x), np.sin(rotation_x)
    y, z = y * cos_x - z * sin_x, y * sin_x + z * cos_x

    depths = constants.CAMERA_DISTANCE - z
    visible = depths > NEAR_PLANE
    safe_depths = np.where(visible, depths, 1.0)

    focal = (height / 2.0) / np.tan(np.radians(constants.CAMERA_FOV) / 2.0)
    screen_xy = np.column_stack((
        width / 2.0 + x * focal / safe_depths,
        height / 2.0 - y * focal / safe_depths,
    ))
    diameters = sizes * constants.POINT_SCALE / safe_depths
    return screen_xy, diameters, depths, visible


class PointRenderer:
    """
    Draws RenderAttributes as additive soft points with a bloom pass.

    Data Contract:
    - Inputs: screen (pygame.Surface) - The display surface.
    - Side Effects: Draws to the screen and acknowledges the attributes it uploaded.
    """
    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.size = screen.get_size()
        self.point_layer = pygame.Surface(self.size)
        scale = constants.BLOOM_RADIUS
        self.bloom_size = (max(1, self.size[0] // scale), max(1, self.size[1] // scale))
        self._sprites = {}
        logger.info(f"PointRenderer initialized at {self.size[0]}x{self.size[1]}.")

    def _sprite(self, radius: int) -> pygame.Surface:
        """White soft-edged point of the given radius, built once and cached."""
        sprite = self._sprites.get(radius)
        if sprite is None:
            values = falloff_sprite(radius)
            sprite = pygame.surfarray.make_surface(np.dstack((values, values, values)))
            self._sprites[radius] = sprite
        return sprite

    def _prepare(self, attributes: RenderAttributes, elapsed_time: float, progress: float):
        rotation_x, rotation_y = scene_rotation(elapsed_time, progress)
        screen_xy, diameters, _, visible = project_points(
            attributes.positions_3d(), attributes.sizes, rotation_x, rotation_y, *self.size
        )
        weights = (attributes.alphas * constants.POINT_OPACITY)[:, np.newaxis]
        rgb = np.clip(attributes.colors_3d() * weights * 255.0, 0, 255).astype(int)
        radii = np.maximum(diameters * 0.5, 1.0).astype(int)
        centers = screen_xy.astype(int)
        return centers[visible], radii[visible], rgb[visible]

    def draw(self, attributes: RenderAttributes, elapsed_time: float, progress: float):
        centers, radii, rgb = self._prepare(attributes, elapsed_time, progress)
        attributes.acknowledge()

        self.screen.fill(constants.BACKGROUND)
        self.point_layer.fill((0, 0, 0))
        for i in range(centers.shape[0]):
            radius = int(radii[i])
            stamp = self._sprite(radius).copy()
            stamp.fill((int(rgb[i, 0]), int(rgb[i, 1]), int(rgb[i, 2])), special_flags=pygame.BLEND_RGB_MULT)
            # Points add onto each other, like additive blending on the GPU.
            self.point_layer.blit(
                stamp,
                (int(centers[i, 0]) - radius, int(centers[i, 1]) - radius),
                special_flags=pygame.BLEND_RGB_ADD
            )
        self.screen.blit(self.point_layer, (0, 0), special_flags=pygame.BLEND_RGB_ADD)

        # Bloom: blur by scaling down and back up, dim, then add on top.
        scaled_surface = pygame.transform.smoothscale(self.point_layer, self.bloom_size)
        blurred_surface = pygame.transform.smoothscale(scaled_surface, self.size)
        intensity = constants.BLOOM_INTENSITY
        blurred_surface.fill((intensity, intensity, intensity), special_flags=pygame.BLEND_RGB_MULT)
        self.screen.blit(blurred_surface, (0, 0), special_flags=pygame.BLEND_RGB_ADD)
