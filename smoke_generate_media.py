"""Manual smoke run against the live OpenAI API (needs OPENAI_API_KEY)."""

from integrations.generation.factory import create_media_client
from integrations.shared.logging import setup_logging

OUT_IMAGE = "openai_smoke.png"
OUT_AUDIO = "openai_smoke.mp3"


def main():
    setup_logging()

    with create_media_client() as client:
        with client.generate_image("a purple llama", size="1024x1024") as image:
            print("Image bytes:", image.content_length, image.mime_type)
            assert image.content_length > 0, "EMPTY IMAGE"
            image.save(OUT_IMAGE)

        with client.generate_audio("This is your AI speaking", voice="alloy", format="mp3") as audio:
            print("Audio bytes:", audio.content_length, audio.mime_type)
            assert audio.content_length > 0, "EMPTY AUDIO"
            audio.save(OUT_AUDIO)

    print("Written:", OUT_IMAGE, OUT_AUDIO)


if __name__ == "__main__":
    main()
