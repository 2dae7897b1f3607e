# core/question_catalog.py
from typing import Dict, Optional, Tuple

from .type_definitions import Question, STEP_VALUES, STEP_TALENTS, STEP_PASSION

# 質問カタログ。ステップ順・質問順に並べる。IDの接頭辞 (v/t/p) はステップに対応する。
QUESTIONS: Tuple[Question, ...] = (
    # --- STEP 1: 価値観 ---
    Question(
        id="v1",
        step=STEP_VALUES,
        question="どんな時に「自分らしくいられる」と感じますか？",
        placeholder="例：好きな音楽を聴きながら一人で考えごとをしている時",
        sub_questions=("誰といる時？", "何をしている時？", "どんな場所で？"),
    ),
    Question(
        id="v2",
        step=STEP_VALUES,
        question="これまでに「許せない」「おかしい」と強く感じたことは何ですか？",
        placeholder="例：頑張っている人が正当に評価されないこと",
        sub_questions=("なぜそう感じたのか", "その時どうしたか"),
    ),
    Question(
        id="v3",
        step=STEP_VALUES,
        question="あなたが尊敬する人、憧れる人は誰ですか？その人のどんなところに惹かれますか？",
        placeholder="例：部活の先輩。誰にでも同じ態度で接するところ",
    ),
    Question(
        id="v4",
        step=STEP_VALUES,
        question="10年後、どんな状態でいられたら「幸せだ」と思えますか？",
        placeholder="例：自由な時間があって、好きな人たちと笑っている",
    ),
    # --- STEP 2: 才能 ---
    Question(
        id="t1",
        step=STEP_TALENTS,
        question="時間を忘れて夢中になった経験、充実していたと感じる経験を教えてください。",
        placeholder="例：文化祭の準備で、クラスの意見をまとめていた時",
        sub_questions=("その時、具体的に何をしていた？", "どこが楽しかった？"),
    ),
    Question(
        id="t2",
        step=STEP_TALENTS,
        question="他の人に対して「なんでこれができないの？」とイライラしてしまうことはありますか？",
        placeholder="例：約束の時間を守らない人",
        sub_questions=("それは自分にとって当たり前にできること？",),
    ),
    Question(
        id="t3",
        step=STEP_TALENTS,
        question="人からよく頼まれること、褒められることは何ですか？",
        placeholder="例：ノートがわかりやすいとよく言われる",
    ),
    Question(
        id="t4",
        step=STEP_TALENTS,
        question="自分の短所だと思うところを教えてください。",
        placeholder="例：心配性で、何度も確認してしまう",
        sub_questions=("その短所が役に立った場面はある？",),
    ),
    # --- STEP 3: 情熱 ---
    Question(
        id="p1",
        step=STEP_PASSION,
        question="お金や役に立つかどうかに関係なく、ついやってしまうことは何ですか？",
        placeholder="例：気になったゲームの攻略を調べ続ける",
    ),
    Question(
        id="p2",
        step=STEP_PASSION,
        question="YouTubeやSNS、本などで、ついつい見てしまうジャンルは何ですか？",
        placeholder="例：宇宙の話、料理動画、古い建物",
        sub_questions=("最近見たものを3つ挙げると？",),
    ),
    Question(
        id="p3",
        step=STEP_PASSION,
        question="もし何の制限もなかったら、一日中何をしていたいですか？",
        placeholder="例：海の近くで絵を描いていたい",
    ),
)

_QUESTIONS_BY_ID: Dict[str, Question] = {q.id: q for q in QUESTIONS}


def questions_for_step(step: str) -> Tuple[Question, ...]:
    """指定されたステップの質問を定義順に返す。未知のステップは空のタプル。"""
    return tuple(q for q in QUESTIONS if q.step == step)


def question_ids_for_step(step: str) -> Tuple[str, ...]:
    return tuple(q.id for q in questions_for_step(step))


def get_question(question_id: str) -> Optional[Question]:
    return _QUESTIONS_BY_ID.get(question_id)
