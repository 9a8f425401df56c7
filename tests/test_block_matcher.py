"""
Tests for Stereo Matching Engines
"""

import pytest
import numpy as np
from hypothesis import given, settings, strategies as st

from stereo_proc.disparity.block_matcher import (
    BlockMatchingEngine, SGBMEngine, StereoMatchingEngine, create_matching_engine
)
from stereo_proc.utils.config_manager import ConfigManager


class TestBlockMatchingEngine:
    """Test suite for the StereoBM engine."""

    @pytest.fixture
    def engine(self):
        """Fixture providing a block matching engine instance."""
        return BlockMatchingEngine()

    def test_engine_initialization(self, engine):
        """Test that the engine picks up the configured parameters."""
        assert engine.disparity_scale == 16
        assert engine.disparity_range == 64
        assert engine.correlation_window_size == 15
        assert engine.prefilter_size == 9
        assert engine.prefilter_cap == 31
        assert engine.min_disparity == 0
        assert engine.texture_threshold == 10
        assert engine.uniqueness_ratio == 15
        assert engine.speckle_size == 100
        assert engine.speckle_range == 4
        assert engine.matcher is not None

    def test_compute_disparity_basic(self, engine, synthetic_stereo_pair):
        """Test raw disparity computation."""
        left_img, right_img = synthetic_stereo_pair

        disparity = engine.compute(left_img, right_img)

        assert disparity.shape == left_img.shape
        assert disparity.dtype == np.int16  # 16-bit fixed point

        # Textured shift of 10 pixels should dominate the valid pixels
        valid = disparity > 0
        assert np.count_nonzero(valid) > 0
        assert abs(np.median(disparity[valid]) - 10 * engine.disparity_scale) <= 8

    def test_compute_color_images(self, engine):
        """Colour inputs are converted to grayscale before matching."""
        left = np.random.randint(0, 255, (100, 150, 3), dtype=np.uint8)
        right = np.random.randint(0, 255, (100, 150, 3), dtype=np.uint8)

        disparity = engine.compute(left, right)
        assert disparity.shape == (100, 150)

    def test_mismatched_image_dimensions(self, engine):
        left_img = np.zeros((100, 150), dtype=np.uint8)
        right_img = np.zeros((100, 200), dtype=np.uint8)

        with pytest.raises(ValueError, match="same dimensions"):
            engine.compute(left_img, right_img)

    def test_non_8bit_images_rejected(self, engine):
        left_img = np.zeros((100, 150), dtype=np.float32)

        with pytest.raises(ValueError, match="8-bit"):
            engine.compute(left_img, left_img)

    def test_disparity_range(self, engine):
        min_disp, max_disp = engine.get_disparity_range()

        assert min_disp == 0
        assert max_disp - min_disp == engine.disparity_range

    def test_parameter_setters(self, engine):
        engine.prefilter_size = 21
        engine.prefilter_cap = 50
        engine.correlation_window_size = 21
        engine.min_disparity = 4
        engine.disparity_range = 128
        engine.texture_threshold = 20
        engine.uniqueness_ratio = 5
        engine.speckle_size = 50
        engine.speckle_range = 8

        assert engine.prefilter_size == 21
        assert engine.prefilter_cap == 50
        assert engine.correlation_window_size == 21
        assert engine.min_disparity == 4
        assert engine.disparity_range == 128
        assert engine.texture_threshold == 20
        assert engine.uniqueness_ratio == 5
        assert engine.speckle_size == 50
        assert engine.speckle_range == 8
        assert engine.get_disparity_range() == (4, 132)

    def test_invalid_parameters_rejected(self, engine):
        with pytest.raises(ValueError):
            engine.disparity_range = 95
        with pytest.raises(ValueError):
            engine.correlation_window_size = 6
        with pytest.raises(ValueError):
            engine.prefilter_size = 3
        with pytest.raises(ValueError):
            engine.prefilter_cap = 0

        # Should remain unchanged
        assert engine.disparity_range == 64
        assert engine.correlation_window_size == 15

    @pytest.mark.property
    @settings(max_examples=20, deadline=None)
    @given(
        disparity_range=st.sampled_from([16, 32, 48, 64]),
        window=st.sampled_from([5, 7, 9, 11, 15, 21])
    )
    def test_property_parameter_validation(self, disparity_range, window):
        """Property test: valid parameter combinations produce a full-size buffer."""
        config = ConfigManager()
        config.set('matcher.disparity_range', disparity_range)
        config.set('matcher.correlation_window_size', window)

        engine = BlockMatchingEngine(config)

        assert engine.disparity_range == disparity_range
        assert engine.correlation_window_size == window

        left_img = np.random.randint(0, 255, (100, 150), dtype=np.uint8)
        right_img = np.random.randint(0, 255, (100, 150), dtype=np.uint8)

        disparity = engine.compute(left_img, right_img)
        assert disparity.shape == (100, 150)


class TestSGBMEngine:
    """Test suite for the StereoSGBM engine."""

    def test_compute_disparity(self, synthetic_stereo_pair):
        config = ConfigManager()
        config.set('matcher.correlation_window_size', 5)
        engine = SGBMEngine(config)
        left_img, right_img = synthetic_stereo_pair

        disparity = engine.compute(left_img, right_img)

        assert engine.disparity_scale == 16
        assert disparity.shape == left_img.shape
        assert disparity.dtype == np.int16

    def test_shared_parameters(self):
        engine = SGBMEngine()
        engine.disparity_range = 96
        engine.uniqueness_ratio = 7

        assert engine.disparity_range == 96
        assert engine.uniqueness_ratio == 7
        assert engine.prefilter_cap == 31


def test_create_matching_engine_default(config_manager):
    assert isinstance(create_matching_engine(config_manager), BlockMatchingEngine)


def test_create_matching_engine_sgbm(config_manager):
    config_manager.set('matcher.type', 'sgbm')
    assert isinstance(create_matching_engine(config_manager), SGBMEngine)


def test_base_engine_is_abstract(config_manager):
    with pytest.raises(TypeError):
        StereoMatchingEngine(config_manager)
