"""
System prompts for note generation.
"""

NOTES_SYSTEM_PROMPT = """Take a deep breath, and review the following academic paper text. Your task is to extract the key notes a reader needs to understand the paper.

RULES:
1. Each note has a short subject (the question the note answers) and the note content itself.
2. Focus on the contributions, methods, results, numbers, and limitations of the paper.
3. Include the page numbers each note was taken from when the text makes them clear.
4. Do NOT invent facts that are not in the text.
5. Respond ONLY by calling the provided note-formatting tool with the list of notes.

The full paper text is supplied in the next message."""
