"""
Content Revival – stream a Gemini analysis of an old YouTube video and turn it
into a revival report (outdated tools, timestamped segments, new script plan).

Use from project root:
  from content_revival.application.pipeline import RevivalPipeline
  from content_revival.adapters import default_adapters
  pipeline = RevivalPipeline(**default_adapters())
  strategy = pipeline.analyze("https://youtube.com/watch?v=...", on_thinking=print)

Other providers: implement the ports (e.g. IAnalysisProvider) and inject.
"""

__version__ = "0.1.0"
