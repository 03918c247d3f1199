from __future__ import annotations

RESEARCHER_SYSTEM_PROMPT = (
    "You are a meticulous research analyst. You only use facts present in the material you "
    "are given, keep source URLs next to the facts they support, and never invent data."
)

RELEVANCE_PROMPT = (
    "Decide whether the web page below contains information relevant to the information "
    "request. If it does, set relevance to true and write in answer the key points from the "
    "page that serve the request, following the compilation instruction, and include the "
    "page URL as the source. If it does not, set relevance to false and leave answer empty."
)

COMPILATION_PROMPT = (
    "Compile the search results below into one section about the information topic. Follow "
    "the compilation policy, merge duplicate facts, keep the source URLs, and drop anything "
    "that does not serve the topic. Put the section text in compilation."
)

FINAL_REPORT_PROMPT = (
    "Write the final report answering the information request. Use only the findings below, "
    "organize the report along the plan, follow the instructions, and keep the source URLs "
    "as references. Output the report as markdown."
)
