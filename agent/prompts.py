"""
Prompt templates for Gemini interactions.

These prompts are designed to:
1. Turn a photo into a poem in a chosen tone and style
2. Re-tone an existing poem without losing its subject
3. Steer image models toward faithful, painterly output

Photos always go after the instructions that refer to them.
"""


class Prompts:
    """Collection of prompt templates for Photo Poet."""

    # =========================================================================
    # POEM PROMPTS
    # =========================================================================

    GENERATE_POEM = """You are an expert poet who specializes in creating lyrical and evocative poems inspired by images. Your task is to analyze the provided photo and compose a poem that captures its essence.

Instructions:
1.  Carefully observe the main subjects, setting, mood, and any details in the photo.
2.  Write a poem that reflects what you see.
3.  Adhere to the specified tone and style.

Tone: {tone}
Style: {style}
Photo:"""

    CUSTOMIZE_POEM = """You are a skilled poet, adept at modifying the tone and style of existing poems.

Original Poem:
{original_poem}

Instructions:
Please revise the poem above to have a {tone} tone. Retain the original poem's subject and overall structure as much as possible.

Revised Poem:"""

    # =========================================================================
    # IMAGE PROMPTS
    # =========================================================================

    SYNTHESIZE_IMAGE = (
        "Generate a new, synthesized image based on the following instructions "
        "and photo references. The final image should have an aspect ratio of "
        "{aspect_ratio}. When generating the new image, you MUST preserve the "
        "apparent ethnicity, gender, and other key physical attributes of any "
        "people depicted in the original image. Instructions: {prompt}"
    )

    POEM_ARTWORK = (
        "Generate a beautiful, artistic, and painterly image that visually "
        "represents the mood and subjects in this poem. Preserve the apparent "
        "ethnicity, gender, and other key physical attributes of any people "
        "depicted in the original image.{style_instructions} The image should "
        "have an aspect ratio of {aspect_ratio}."
    )

    POEM_FOR_INSPIRATION = "Poem for inspiration: {poem}"

    CLASSIFY_ART_STYLE = """Look at this photo and the poem written about it. Pick ONE art style that would suit a painting of this scene and the poem's mood (for example: watercolor, impressionist oil, ink wash, pastel, gouache, woodblock print).

Poem:
{poem}

Respond in JSON format:
{{
    "style_name": "...",
    "style_instructions": "One or two sentences telling a painter how to render the scene in this style."
}}

Photo:"""

    # =========================================================================
    # SPEECH / VIDEO PROMPTS
    # =========================================================================

    VOICE_PROBE = "Hello, this is a test of the {voice} voice."

    ANIMATE_PHOTO = "Make the image come to life with subtle motion."
