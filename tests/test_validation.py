"""Tests for sign request validation."""

import pytest

from voxsign.params import IconPosition, PixelBitmap, SignSpecification, SignType
from voxsign.validation import (
    FieldError,
    ValidationError,
    normalize_keys,
    validate_request,
    validate_specification,
)


class TestNormalizeKeys:

    def test_wire_names(self):
        assert normalize_keys({'hangingSignThickness': 2, 'signWithIcon': False}) == {
            'thickness': 2, 'with_icon': False,
        }

    def test_attribute_names_pass_through(self):
        assert normalize_keys({'frame_width': 3, 'text': 'A'}) == {'frame_width': 3, 'text': 'A'}

    def test_unknown_keys_dropped(self, caplog):
        with caplog.at_level('WARNING'):
            assert normalize_keys({'colour': 'red', 'width': 20}) == {'width': 20}
        assert 'colour' in caplog.text


class TestValidateRequest:

    def test_defaults(self):
        spec = validate_request({})
        assert spec == SignSpecification()
        assert spec.sign_width == 48
        assert spec.sign_height == 40

    def test_wire_request(self):
        spec = validate_request({
            'signType': 'hanging',
            'hangingWidth': 80,
            'hangingIconPosition': 'right',
            'hangingSignThickness': 2,
            'hangingSignIconOffsetX': -1,
            'hangingSignTextOffsetX': 3,
            'signIconScale': 20,
            'text': 'SHOP',
        })
        assert spec.sign_type is SignType.HANGING
        assert spec.icon_position is IconPosition.RIGHT
        assert (spec.sign_width, spec.sign_height) == (80, 16)
        assert (spec.available_width, spec.available_height) == (76, 12)
        assert spec.thickness == 2
        assert (spec.icon_offset_x, spec.text_offset_x) == (-1, 3)

    def test_icon_mapping(self):
        spec = validate_request({'icon': {'width': 2, 'height': 1, 'pixels': [True, False],
                                          'offsetY': 1}})
        assert spec.icon == PixelBitmap(2, 1, (True, False), offset_y=1)
        assert spec.has_icon

    def test_float_icon_scale(self):
        assert validate_request({'iconScale': 37.5}).icon_scale == 37.5

    def test_fractional_vertical_offsets(self):
        spec = validate_request({'signIconOffsetY': -0.5, 'textOffsetY': 1.5})
        assert (spec.icon_offset_y, spec.text_offset_y) == (-0.5, 1.5)

    @pytest.mark.parametrize("request_data,field", [
        ({'width': 15}, 'width'),
        ({'height': 8}, 'height'),
        ({'width': 20.0}, 'width'),
        ({'frameWidth': 0}, 'frame_width'),
        ({'frame': 'yes'}, 'frame'),
        ({'hangingWidth': 50}, 'hanging_width'),
        ({'hangingWidth': True}, 'hanging_width'),
        ({'hangingSignThickness': 0}, 'thickness'),
        ({'signType': 'banner'}, 'sign_type'),
        ({'hangingIconPosition': 'top'}, 'icon_position'),
        ({'text': 42}, 'text'),
        ({'signIconScale': 'big'}, 'icon_scale'),
        ({'textOffsetY': '1'}, 'text_offset_y'),
        ({'signWithIcon': 1}, 'with_icon'),
        ({'icon': 'icon.png'}, 'icon'),
    ])
    def test_rejects(self, request_data, field):
        with pytest.raises(ValidationError) as excinfo:
            validate_request(request_data)
        assert excinfo.value.fields == [field]

    def test_bool_is_not_an_integer(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request({'width': True})
        assert excinfo.value.fields == ['width']

    def test_collects_all_errors(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request({'width': 10, 'height': 10, 'frameWidth': -1})
        err = excinfo.value
        assert err.fields == ['width', 'height', 'frame_width']
        assert 'width: must be >= 16, got 10' in str(err)
        assert isinstance(err, ValueError)

    def test_icon_pixel_count_mismatch(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request({'icon': {'width': 2, 'height': 2, 'pixels': [True]}})
        assert excinfo.value.fields == ['icon.pixels']

    def test_icon_bad_dimensions(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request({'icon': {'width': -1, 'height': 'x', 'pixels': []}})
        assert excinfo.value.fields == ['icon.width', 'icon.height']

    def test_icon_non_boolean_pixels(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request({'icon': {'width': 1, 'height': 1, 'pixels': [1]}})
        assert excinfo.value.fields == ['icon.pixels']

    def test_non_mapping(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_request(['width', 48])
        assert excinfo.value.fields == ['<root>']

    def test_inactive_group_is_still_checked(self):
        # Hanging fields are validated on standard signs too.
        with pytest.raises(ValidationError):
            validate_request({'signType': 'standard', 'hangingWidth': 70})


def test_validate_specification():
    spec = SignSpecification(text='OK')
    assert validate_specification(spec) == spec
    with pytest.raises(ValidationError):
        validate_specification(SignSpecification(hanging_width=32))


def test_field_error_str():
    assert str(FieldError('width', 'too small')) == 'width: too small'


def test_validate_specification_coerces_values():
    spec = validate_specification(SignSpecification(
        sign_type='hanging', icon_position='right',
        icon={'width': 1, 'height': 1, 'pixels': [True]}))
    assert spec.sign_type is SignType.HANGING
    assert spec.icon_position is IconPosition.RIGHT
    assert spec.icon == PixelBitmap(1, 1, (True,))
