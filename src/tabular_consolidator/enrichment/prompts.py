"""Prompt templates for the OpenAI-backed enrichment and report assistant."""

SYSTEM_PROMPT = (
    "You are an expert data analyst who consolidates spreadsheets from different teams "
    "into one clean reporting table. You answer with valid JSON when asked for JSON."
)

ENRICHMENT_PROMPT = """Several spreadsheets were consolidated into one table by a deterministic
merge engine. Here is the structure and sample data of every source, followed by the
engine's consolidated headers, detected primary key and a sample of merged records:

{structure}

Review the consolidation. Return ONLY a JSON object with this exact structure:

{{
  "summary": "Brief summary of the consolidation",
  "insights": ["insight about data patterns", "insight about common fields"],
  "recommendations": ["recommendation for data quality", "recommendation for workflow"],
  "consolidatedHeaders": ["header1", "header2"],
  "mergedData": []
}}

Leave "mergedData" empty unless you can propose a better unified set of records that
covers every entity. Use consistent field names. Never add bookkeeping fields such as
source file, source sheet or original row number."""

QUESTION_PROMPT = """Given the following report data and summary, answer the user's question
concisely and helpfully.

Report Summary:
{summary}

Key Insights:
{insights}

Merged Data (first {sample_size} rows):
{records}

User Question:
{question}

Answer:"""

TRANSFORM_PROMPT = """Given the following merged spreadsheet data, perform the requested
transformation for a spreadsheet export.

Merged Data:
{records}

User Instructions:
{instructions}

Return ONLY a JSON object of the form {{"rows": [{{...}}, ...]}} where every row is a flat
object mapping column name to value. Never add source file, source sheet or original row
fields."""
