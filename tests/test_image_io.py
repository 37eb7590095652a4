import numpy as np
from PIL import Image

from level_map.image_io import is_image_file, load_image, save_image


def test_rgb_round_trip(tmp_path, random_image):
    path = save_image(tmp_path / "noise.png", random_image)
    pixels, alpha = load_image(path)
    assert alpha is None
    np.testing.assert_array_equal(pixels, random_image)


def test_save_forces_png_suffix(tmp_path, random_image):
    path = save_image(tmp_path / "noise.jpg", random_image)
    assert path.suffix == ".png"
    assert path.exists()


def test_greyscale_loads_as_one_channel(tmp_path):
    grey = np.arange(64, dtype=np.uint8).reshape(8, 8)
    Image.fromarray(grey).save(tmp_path / "grey.png")
    pixels, alpha = load_image(tmp_path / "grey.png")
    assert pixels.shape == (8, 8, 1)
    assert alpha is None
    np.testing.assert_array_equal(pixels[..., 0], grey)


def test_alpha_is_split_off(tmp_path):
    rgba = np.zeros((4, 5, 4), dtype=np.uint8)
    rgba[..., 0] = 200
    rgba[..., 3] = 128
    Image.fromarray(rgba).save(tmp_path / "alpha.png")
    pixels, alpha = load_image(tmp_path / "alpha.png")
    assert pixels.shape == (4, 5, 3)
    assert (pixels[..., 0] == 200).all()
    assert alpha is not None and (alpha == 128).all()

    out = save_image(tmp_path / "out.png", pixels, alpha)
    with Image.open(out) as im:
        assert im.mode == "RGBA"


def test_is_image_file(tmp_path, random_image):
    good = save_image(tmp_path / "ok.png", random_image)
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    assert is_image_file(good)
    assert not is_image_file(bad)


def test_icc_profile_applied_to_original_mode(tmp_path, monkeypatch):
    from PIL import ImageCms

    from level_map import image_io

    profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB")).tobytes()
    path = tmp_path / "cmyk.jpg"
    Image.new("CMYK", (4, 3), (0, 0, 0, 0)).save(path, icc_profile=profile)

    seen_modes = []

    def fake_profile_to_profile(im, src, dst, **kwargs):
        seen_modes.append(im.mode)
        assert kwargs["outputMode"] == "RGBA"
        return im.convert("RGBA")

    monkeypatch.setattr(image_io.ImageCms, "profileToProfile", fake_profile_to_profile)
    pixels, alpha = load_image(path)

    assert seen_modes == ["CMYK"]
    assert pixels.shape == (3, 4, 3)
    assert alpha is None
