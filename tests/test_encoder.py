"""Tests for TextureEncoder routing, skips, and contract handling."""

import unittest

from TexBrew import encode_texture
from TexBrew.config import ContainerFamily, ExportConfig, TextureFormat
from TexBrew.core import TextureContractError, TextureResource
from TexBrew.encoder import TextureEncoder


def _resource(fmt, width=4, height=4, mipmap=False, payload=b"\x00" * 8,
              name="tex", path_id=0):
    return TextureResource(name=name, width=width, height=height,
                           texture_format=fmt, mipmap=mipmap, payload=payload,
                           path_id=path_id)


class TestSkips(unittest.TestCase):
    def setUp(self):
        self.encoder = TextureEncoder()

    def test_empty_payload_is_skipped(self):
        with self.assertLogs("texture_export.encoder", level="WARNING") as cm:
            result = self.encoder.encode(_resource(TextureFormat.DXT1, payload=b""))
        self.assertTrue(result.skipped)
        self.assertEqual(result.outputs, [])
        self.assertIn("empty", result.skip_reason)
        self.assertTrue(any("empty" in line for line in cm.output))

    def test_empty_payload_wins_over_bad_format(self):
        result = self.encoder.encode(_resource(99, payload=b""))
        self.assertIn("empty", result.skip_reason)

    def test_unknown_ordinal_is_skipped(self):
        with self.assertLogs("texture_export.encoder", level="WARNING"):
            result = self.encoder.encode(_resource(99))
        self.assertTrue(result.skipped)
        self.assertIn("unknown texture format 99", result.skip_reason)

    def test_unsupported_format_is_skipped(self):
        for fmt in (TextureFormat.RGBA4444, TextureFormat.ATF_RGB_DXT1,
                    TextureFormat.ATF_RGBA_JPG, TextureFormat.ATF_RGB_JPG):
            with self.assertLogs("texture_export.encoder", level="WARNING"):
                result = self.encoder.encode(_resource(fmt))
            self.assertIn("unsupported texture format", result.skip_reason)
            self.assertIn(fmt.name, result.skip_reason)
            self.assertEqual(result.outputs, [])

    def test_skip_reason_uses_path_id_for_unnamed_textures(self):
        result = self.encoder.encode(_resource(99, name="", path_id=-42))
        self.assertEqual(result.name, "Texture2D_-42")
        self.assertIn("Texture2D_-42", result.skip_reason)


class TestContracts(unittest.TestCase):
    def test_zero_width_raises_with_name(self):
        with self.assertRaises(TextureContractError) as ctx:
            encode_texture(_resource(TextureFormat.DXT1, width=0, name="broken"))
        self.assertEqual(ctx.exception.resource_name, "broken")
        self.assertIn("broken", str(ctx.exception))
        self.assertIn("dimensions", ctx.exception.invariant)

    def test_channel_remainder_raises_with_name(self):
        payload = b"\x00" * 6
        with self.assertRaises(TextureContractError) as ctx:
            encode_texture(_resource(TextureFormat.ARGB32, 1, 1, payload=payload,
                                     name="odd"))
        self.assertEqual(ctx.exception.resource_name, "odd")

    def test_oversized_tga_dimension_raises_with_name(self):
        with self.assertRaises(TextureContractError) as ctx:
            encode_texture(_resource(TextureFormat.Alpha8, 70000, 1,
                                     payload=bytes(70000), name="wide"))
        self.assertEqual(ctx.exception.resource_name, "wide")

    def test_partial_dds_pixel_raises_with_name(self):
        with self.assertRaises(TextureContractError) as ctx:
            encode_texture(_resource(TextureFormat.RGB565, 1, 1, payload=bytes(3),
                                     name="odd565"))
        self.assertEqual(ctx.exception.resource_name, "odd565")

    def test_partial_pixel_through_override_raises(self):
        config = ExportConfig(container_overrides={"RGBA32": "dds"})
        with self.assertRaises(TextureContractError):
            TextureEncoder(config).encode(
                _resource(TextureFormat.RGBA32, 1, 1, payload=bytes(5)))

    def test_tga_slicing_error_carries_name(self):
        with self.assertRaises(TextureContractError) as ctx:
            encode_texture(_resource(TextureFormat.RGB24, 4, 4, payload=b"\x00" * 10,
                                     name="short"))
        self.assertEqual(ctx.exception.resource_name, "short")


class TestRouting(unittest.TestCase):
    def test_each_family_gets_its_extension(self):
        cases = [
            (_resource(TextureFormat.DXT5, payload=b"\x00" * 16), "dds"),
            (_resource(TextureFormat.ETC_RGB4, payload=b"\x00" * 8), "ktx"),
            (_resource(TextureFormat.Alpha8, payload=b"\x00" * 16), "tga"),
        ]
        for resource, ext in cases:
            result = encode_texture(resource)
            self.assertFalse(result.skipped)
            self.assertEqual([o.file_extension for o in result.outputs], [ext])

    def test_override_routes_etc_to_pkm(self):
        config = ExportConfig(container_overrides={"ETC_RGB4": "pkm"})
        encoder = TextureEncoder(config)
        self.assertIs(encoder.family_for(TextureFormat.ETC_RGB4), ContainerFamily.PKM)
        (out,) = encoder.encode(_resource(TextureFormat.ETC_RGB4, 5, 3)).outputs
        self.assertEqual(out.file_extension, "pkm")
        self.assertEqual(out.container_bytes[:6], b"PKM 10")

    def test_override_routes_rgba32_to_dds(self):
        config = ExportConfig(container_overrides={"4": "DDS"})
        payload = bytes(range(64))
        (out,) = TextureEncoder(config).encode(
            _resource(TextureFormat.RGBA32, payload=payload)).outputs
        self.assertEqual(out.file_extension, "dds")
        self.assertEqual(out.container_bytes[128:], payload)

    def test_override_to_incapable_writer_is_contract_violation(self):
        config = ExportConfig(container_overrides={"DXT1": "pkm"})
        with self.assertRaises(TextureContractError):
            TextureEncoder(config).encode(_resource(TextureFormat.DXT1))

    def test_ktx_options_come_from_config(self):
        config = ExportConfig()
        config.ktx.byte_swap = False
        config.ktx.image_size_field = "payload"
        (out,) = TextureEncoder(config).encode(
            _resource(TextureFormat.ATC_RGB4, payload=b"\x00" * 8)).outputs
        self.assertEqual(out.container_bytes[12:16], b"\x01\x02\x03\x04")
        self.assertEqual(out.container_bytes[64:68], (8).to_bytes(4, "little"))


def test_encode_does_not_mutate_resource(resource_factory):
    payload = bytes([1, 2, 3, 4] * 16)
    resource = resource_factory(TextureFormat.ARGB32, 4, 4, payload=payload)
    encode_texture(resource)
    assert resource.payload == payload
    assert resource.texture_format is TextureFormat.ARGB32


def test_encode_is_deterministic(resource_factory):
    resource = resource_factory(TextureFormat.RGB24, 4, 4, mipmap=True,
                                payload=bytes(range(63)))
    first = encode_texture(resource)
    second = encode_texture(resource)
    assert [o.container_bytes for o in first.outputs] == \
        [o.container_bytes for o in second.outputs]
    assert [o.file_name for o in first.outputs] == \
        ["tex_mip_0.tga", "tex_mip_1.tga", "tex_mip_2.tga"]
