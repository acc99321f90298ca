"""Prompts sent to Gemini. The analysis prompt fixes the stream markers the extractor relies on."""

from typing import Optional

# Plain JSON example (no comments) so the model copies valid JSON
SCHEMA_EXAMPLE = """
{
  "originalVideoMetadata": {
    "title": "Video Title",
    "publishDate": "2023-01-01",
    "currentViews": 15000
  },
  "segments": [
    {
      "startTime": "00:00:00",
      "endTime": "00:02:30",
      "summary": "Intro to topic",
      "subjects": ["React", "Class Components"],
      "needsUpdate": true
    }
  ],
  "outdatedItems": [
    {
      "subject": "State Management",
      "oldTool": "Redux (Old Style)",
      "newTool": "Redux Toolkit",
      "reason": "Redux Toolkit reduces boilerplate...",
      "impactScore": 8,
      "affectedSegmentIndices": [0]
    }
  ],
  "revivalPlan": {
    "title": "New Optimized Title",
    "description": "New Description...",
    "scriptOutline": "Markdown content..."
  },
  "predictedViews": 50000,
  "predictedEngagement": 85
}
"""


def build_analysis_prompt(video_url: str, has_frames: bool = False) -> str:
    prompt = f"""
You are a Content Revival Expert for YouTube Developers.
I am providing a YouTube link: "{video_url}".

Your task is to:
1. Research this video to understand its content, find its *actual* current view count and publish date using Google Search.
2. Break the video down into small segments. For each segment add a summary and identify the subjects discussed in it.
3. For each subject, fact check it against Google Search and compare it against the latest standards.
4. Map outdated tools to specific timestamped segments in the video.
5. Create a comprehensive revival strategy including a new title, description, and script outline.

CRITICAL INSTRUCTION:
You must "Think Out Loud" before providing the final JSON.
1. First, write a detailed analysis inside a <thinking> tag. Explain your research steps, exactly what you found for the view count, and your reasoning for each outdated item.
2. Then, provide the final structured data inside a ```json``` code block.

The JSON must strictly follow this structure (valid JSON, no comments):
{SCHEMA_EXAMPLE}
"""
    if has_frames:
        prompt += "\nI have also provided a visual frame/thumbnail for context."
    return prompt


def build_overlay_prompt(update_context: Optional[str]) -> str:
    return f"""
This is a frame from an old coding tutorial.
The user is updating this content.
Update: {update_context or ''}
Task: Edit this image to reflect the NEW update.
Keep most of the frame the same, highlight what needs to be updated in the provided frame and overlay the text. Do not generate the full image from scratch.
"""
