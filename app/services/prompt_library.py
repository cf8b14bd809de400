# /app/services/prompt_library.py

"""
This file is the central, version-controlled library for all master prompts
used by the application's AI services. Prompts are code: every change to
wording here changes grading behaviour, so they live in one place.
"""

# --- Text Extraction ---

SUBMISSION_OCR_PROMPT = (
    "Please extract all text content from this image. This appears to be a student assignment. "
    "Return only the text content, maintaining the original structure and formatting as much as possible."
)


# --- Submission Scoring ---

SCORING_SYSTEM_INSTRUCTION = "You are an expert academic evaluator. Always respond with valid JSON format."

SUBMISSION_SCORING_PROMPT = """
You are an expert academic evaluator. Please evaluate this student's assignment submission.

Assignment Title: {assignment_title}
Assignment Description: {assignment_description}
Maximum Score: {max_score}

Student's Response:
{extracted_text}

Please provide a comprehensive evaluation in the following JSON format:
{{
  "score": <number between 0 and {max_score}>,
  "percentage": <percentage score>,
  "strengths": [
    "<strength 1>",
    "<strength 2>",
    "<strength 3>"
  ],
  "improvements": [
    "<area for improvement 1>",
    "<area for improvement 2>",
    "<area for improvement 3>"
  ],
  "detailed_feedback": "<comprehensive paragraph explaining the evaluation>",
  "recommendations": [
    "<recommendation 1>",
    "<recommendation 2>",
    "<recommendation 3>"
  ],
  "overall_comments": "<overall assessment and encouragement>"
}}

Evaluate based on:
1. Content accuracy and understanding
2. Completeness of the response
3. Clarity and organization
4. Critical thinking and analysis
5. Use of examples and evidence

Be constructive, specific, and encouraging in your feedback.
"""


# --- Assessment Generation ---

GENERATION_SYSTEM_INSTRUCTION = (
    "You are an expert academic assessment creator. "
    "Always respond with valid JSON format that matches the specified structure exactly."
)

ASSESSMENT_GENERATION_PROMPT = """
Create a comprehensive academic assessment on the topic: "{topic}"

Requirements:
- Difficulty Level: {difficulty_level}
- Number of Questions: {total_questions}
- Assessment Title: {title}
- Description: {description}

Please provide a well-structured assessment in the following JSON format:
{{
  "title": "<assessment title>",
  "description": "<assessment description>",
  "questions": [
    {{
      "question_text": "<question text>",
      "question_type": "essay|multiple_choice|short_answer",
      "marks": <marks for this question>,
      "order_index": <question number starting from 1>,
      "sample_answer": "<brief sample answer or key points>",
      "difficulty": "easy|medium|hard"
    }}
  ],
  "total_marks": <sum of all question marks>,
  "estimated_duration": "<estimated time to complete>",
  "learning_objectives": [
    "<objective 1>",
    "<objective 2>"
  ]
}}

Guidelines:
1. Distribute marks appropriately across questions (typically 5-20 marks per question)
2. Include a mix of question types if appropriate
3. Ensure questions test different cognitive levels (knowledge, understanding, application, analysis)
4. Make questions clear and specific
5. For {difficulty_level} difficulty, adjust complexity accordingly
6. Ensure total marks add up correctly
"""
