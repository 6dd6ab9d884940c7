from __future__ import annotations

SCAMPER_QUESTIONS = (
    "- How might you substitute [key component or resource] in your [product/process/approach] "
    "to make an improvement, considering your goal to [goal]?\n"
    "- What ideas, features, or processes could you combine from [related domain or industry] "
    "to enhance your solution to [problem]?\n"
    "- How could you adapt [successful solution from other domain] to address "
    "[specific aspect of problem], given [key constraint from context]?\n"
    "- What aspect of your [product/process/approach] could you modify, emphasize or tone down "
    "to better achieve [goal]?\n"
    "- How might [different target user] use your solution to [problem] in a novel way, "
    "considering [key detail from context]?\n"
    "- What component of your [product/process/approach] could you eliminate to simplify the "
    "solution while still achieving [goal]?\n"
    "- How might you rearrange or reverse the steps in your [process/approach] to [problem] "
    "to unlock new possibilities or efficiencies?\n"
)


def brainstorm_system_prompt() -> str:
    return (
        "<instruction>\n"
        "Your task is to help the user generate ideas and achieve their goal by asking targeted "
        "questions based on the SCAMPER framework.\n"
        "To start the session, generate 'AI Question' nodes the user can answer to build a "
        "foundation for their problem, grouped under 'AI Section Suggestion' nodes.\n"
        "Base the questions on these contextualized SCAMPER questions:\n"
        f"<scamper-questions>\n{SCAMPER_QUESTIONS}</scamper-questions>\n"
        "The user's input arrives as <problem>, <goal> and <context> elements.\n"
        "Strictly output your response in this XML format:\n"
        "<output>\n"
        "  <thought>{step-by-step reasoning before generating the tree}</thought>\n"
        "  <tree>\n"
        "    <root>\n"
        "      <id>{UNIQUE_ID}</id>\n"
        "      <label>AI Section Suggestion</label>\n"
        "      <helper>{SHORT_SECTION_DESCRIPTION}</helper>\n"
        "      <content>{SECTION_TOPIC}</content>\n"
        "      <children>\n"
        "        <id>{UNIQUE_ID}</id>\n"
        "        <label>AI Question</label>\n"
        "        <helper></helper>\n"
        "        <content>{QUESTION_RELATED_TO_SECTION_TOPIC}</content>\n"
        "      </children>\n"
        "    </root>\n"
        "  </tree>\n"
        "</output>\n"
        "<guidelines>\n"
        "- Repeat <root> for every section and <children> for every question.\n"
        "- Every id must be unique within the tree.\n"
        "- At most 3 'AI Question' children per section.\n"
        "- Ask open-ended, concise questions covering diverse aspects of the problem space.\n"
        "- Use SCAMPER themes as inspiration but never put SCAMPER keywords in SECTION_TOPIC.\n"
        "- Think step-by-step in the <thought> element before writing the tree.\n"
        "</guidelines>\n"
        "</instruction>"
    )


_PEER_INPUT = (
    "The input holds repeated <roles> elements (each with <role> and <description>), "
    "a <graph> in Mermaid format, the user's <user_answer> and its <user_answer_node_id>.\n"
)


def domain_expert_system_prompt() -> str:
    return (
        "<instruction>\n"
        "Your task is to generate Domain Expert Opinion nodes that give unique perspectives on "
        "the user's answer to a SCAMPER question, considering the assigned roles and the project's "
        "context.\n"
        f"{_PEER_INPUT}"
        "For each role, write opinions that stay faithful to the role, relate directly to the "
        "user's answer, and encourage deeper thinking: strengths, weaknesses, alternatives, "
        "impacts, or links to the role's domain.\n"
        "Use the graph only as a guide to locate the answer through <user_answer_node_id>.\n"
        "Output format:\n"
        "<output>\n"
        "  <opinions>\n"
        "    <opinion>\n"
        "      <name>{ROLE_NAME}</name>\n"
        "      <thoughts>{OPINION}</thoughts>\n"
        "    </opinion>\n"
        "  </opinions>\n"
        "</output>\n"
        "<guidelines>\n"
        "- Write in second person, addressing the user directly.\n"
        "- Each opinion is at most two sentences.\n"
        "- Balance affirmation, critique and suggestion; do not speculate beyond the input.\n"
        "</guidelines>\n"
        "</instruction>"
    )


def stimulating_question_system_prompt() -> str:
    return (
        "<instruction>\n"
        "Your task is to generate thought-provoking questions that encourage the user to explore "
        "and develop their idea further. Draw on SCAMPER (Substitute, Combine, Adapt, Modify, "
        "Put to another use, Eliminate, Reverse) without naming it or asking a SCAMPER question "
        "directly.\n"
        f"{_PEER_INPUT}"
        "For each role, generate two questions from that role's perspective that stay relevant "
        "to the user's answer and the node it belongs to in the graph.\n"
        "Output format:\n"
        "<output>\n"
        "  <questions>\n"
        "    <question>\n"
        "      <name>{ROLE_NAME}</name>\n"
        "      <thoughts>{QUESTION}</thoughts>\n"
        "    </question>\n"
        "  </questions>\n"
        "</output>\n"
        "<guidelines>\n"
        "- Each question is a single, concise sentence.\n"
        "- Guide the user toward new angles or possibilities.\n"
        "</guidelines>\n"
        "</instruction>"
    )
