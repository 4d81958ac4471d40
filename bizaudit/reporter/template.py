"""
Template Report Generator

AI-free report with the same shape as an AI report. Used when augmentation is
skipped, rate-limited, unavailable, or still pending on a cold read, so the
report view is never empty.

Selection:
- Gaps: one narrative per weakest category (3), vertical-specific where one
  exists, a generic "{label} Improvement Needed" narrative otherwise
- Quick wins and strategic recommendations: three fixed items per vertical
- Executive summary: built from the overall score, benchmark, strongest and
  weakest categories

English and Bulgarian narratives ship; any other language falls back to
English.
"""

import logging
from typing import Dict, List, Optional, Tuple

from bizaudit.models.report import SOURCE_TEMPLATE, AIReportData, ReportItem
from bizaudit.models.scores import AuditScores, CategoryScore
from bizaudit.models.submission import AuditSubmission

logger = logging.getLogger(__name__)

GAP_COUNT = 3

DEFAULT_BUSINESS_NAME = {"en": "Your Business", "bg": "Вашият бизнес"}


def _v(home_services: str, real_estate: str) -> Tuple[str, str]:
    return (home_services, real_estate)


# =============================================================================
# GAP NARRATIVES  (str, or (home services, real estate) pair)
# =============================================================================

GAP_NARRATIVES: Dict[str, Dict[str, Dict[str, object]]] = {
    "en": {
        "leads": {
            "title": "Lead Response & Conversion Gaps",
            "description": _v(
                "Your lead response time and conversion tracking are costing you jobs. "
                "Businesses that respond within 5 minutes are 21x more likely to qualify "
                "a lead than those who respond after 30 minutes.",
                "Your lead response speed and nurture cadence are leaving deals on the "
                "table. Teams that respond within 5 minutes convert 3x more internet "
                "leads into appointments.",
            ),
            "impact": "Estimated 15–30% more closed deals with immediate response automation",
        },
        "technology": {
            "title": "Technology Stack Underutilization",
            "description": _v(
                "Your current software isn't working hard enough for you. Modern field "
                "service platforms automate scheduling, dispatch, invoicing, and "
                "follow-up, eliminating manual work and human error.",
                "Your CRM isn't delivering its full value. The best teams use their CRM "
                "as the single source of truth for all lead and client activity, "
                "enabling coaching, forecasting, and automation.",
            ),
            "impact": "10–20 hours/week recovered through automation",
        },
        "scheduling": {
            "title": _v("Scheduling & Dispatch Inefficiency", "Lead Management Process Gaps"),
            "description": _v(
                "Manual scheduling and dispatching creates gaps in your calendar, "
                "wastes technician drive time, and makes it nearly impossible to handle "
                "emergency calls efficiently.",
                "Without a documented, automated lead follow-up system, leads fall "
                "through the cracks. The average lead requires 8–12 touches before "
                "converting; most teams give up after 2–3.",
            ),
            "impact": _v(
                "15–25% more jobs completed per week with route optimization",
                "20–40% more leads converted with systematic nurture",
            ),
        },
        "communication": {
            "title": "Customer Communication Breakdowns",
            "description": _v(
                "Missing appointment reminders, no on-the-way notifications, and "
                "inconsistent follow-up are the #1 drivers of negative reviews and "
                "cancellations.",
                "Inconsistent communication with active clients and no systematic "
                "past-client follow-up is causing referral leakage and repeat business "
                "loss.",
            ),
            "impact": "25–40% reduction in cancellations and no-shows",
        },
        "followUp": {
            "title": "Follow-Up & Retention Failures",
            "description": _v(
                "You're leaving repeat and referral revenue on the table. Most "
                "businesses get 40–60% of revenue from repeat customers, but only if "
                "they stay top-of-mind with consistent follow-up.",
                "Post-close follow-up and referral systems are the most profitable "
                "activity in real estate, but only if systematized. Without automation, "
                "it simply doesn't happen consistently.",
            ),
            "impact": "30–50% increase in repeat/referral revenue",
        },
        "operations": {
            "title": "Operations & KPI Blind Spots",
            "description": _v(
                "Without tracking key performance indicators, you're flying blind. You "
                "can't improve what you don't measure, and your competitors are using "
                "data to optimize every aspect of their business.",
                "Without clear agent KPIs and accountability systems, top performers "
                "carry underperformers and overall team productivity suffers. "
                "Data-driven coaching is the differentiator.",
            ),
            "impact": "15–25% productivity improvement through accountability systems",
        },
        "financial": {
            "title": "Financial Operations Gaps",
            "description": _v(
                "Inconsistent pricing, slow invoicing, and poor collections are directly "
                "impacting your cash flow and profitability. Businesses with "
                "standardized pricing and same-day digital invoicing collect 30% faster.",
                "Without detailed P&L tracking and per-channel marketing ROI, you can't "
                "make smart investment decisions or identify which lead sources are "
                "actually profitable.",
            ),
            "impact": "Improved cash flow and 10–20% reduction in uncollected revenue",
        },
    },
    "bg": {
        "leads": {
            "title": "Пропуски в отговор на запитвания и конверсия",
            "description": _v(
                "Времето Ви за отговор на запитвания и проследяването на конверсиите Ви "
                "струват поръчки. Бизнесите, които отговарят до 5 минути, имат 21 пъти "
                "по-голям шанс да квалифицират клиент от тези, които отговарят след 30 минути.",
                "Скоростта Ви на отговор и честотата на проследяване оставят сделки на "
                "масата. Екипите, които отговарят до 5 минути, конвертират 3 пъти повече "
                "интернет запитвания в срещи.",
            ),
            "impact": "Очаквани 15–30% повече приключени сделки с автоматизация на отговорите",
        },
        "technology": {
            "title": "Недостатъчно използване на технологиите",
            "description": _v(
                "Текущият Ви софтуер не работи достатъчно ефективно за Вас. Модерните "
                "платформи за полеви услуги автоматизират планиране, диспечиране, "
                "фактуриране и проследяване, елиминирайки ръчна работа и човешки грешки.",
                "Вашият CRM не носи пълната си стойност. Най-добрите екипи използват CRM "
                "като единствен източник на истина за всички активности с клиенти, "
                "позволявайки обучение, прогнозиране и автоматизация.",
            ),
            "impact": "10–20 часа/седмица спестени чрез автоматизация",
        },
        "scheduling": {
            "title": _v(
                "Неефективност в планирането и диспечирането",
                "Пропуски в управлението на клиенти",
            ),
            "description": _v(
                "Ръчното планиране и диспечиране създава празнини в графика Ви, хаби "
                "време за пътуване на техниците и прави почти невъзможно ефективното "
                "обработване на спешни обаждания.",
                "Без документирана автоматизирана система за проследяване, клиентите се "
                "губят. Средното запитване изисква 8–12 контакта преди конверсия, а "
                "повечето екипи се отказват след 2–3.",
            ),
            "impact": _v(
                "15–25% повече завършени задачи седмично с оптимизация на маршрути",
                "20–40% повече конвертирани клиенти със системно проследяване",
            ),
        },
        "communication": {
            "title": "Пропуски в комуникацията с клиентите",
            "description": _v(
                "Липсващи напомняния за срещи, без известия „на път съм“ и "
                "непоследователно проследяване са причина №1 за негативни отзиви и отмени.",
                "Непоследователна комуникация с активни клиенти и липса на системно "
                "проследяване на минали клиенти причинява загуба на препоръки и повторен бизнес.",
            ),
            "impact": "25–40% намаляване на отмените и неявяванията",
        },
        "followUp": {
            "title": "Пропуски в проследяването и задържането",
            "description": _v(
                "Оставяте повторни приходи и препоръки на масата. Повечето бизнеси "
                "получават 40–60% от приходите си от повторни клиенти, но само ако "
                "остават в съзнанието им чрез последователно проследяване.",
                "Проследяването след сделка и системите за препоръки са най-печелившата "
                "дейност в недвижимите имоти, но само ако е систематизирана. Без "
                "автоматизация просто не се случва последователно.",
            ),
            "impact": "30–50% увеличение на приходите от повторни клиенти и препоръки",
        },
        "operations": {
            "title": "Операционни и KPI слепи петна",
            "description": _v(
                "Без проследяване на ключови показатели за ефективност, работите на "
                "сляпо. Не можете да подобрите нещо, което не измервате, а конкурентите "
                "Ви използват данни за оптимизиране на всеки аспект от бизнеса си.",
                "Без ясни KPI за агентите и системи за отчетност, топ изпълнителите "
                "носят на гърба си по-слабите и общата продуктивност на екипа страда. "
                "Обучението, базирано на данни, е ключовият диференциатор.",
            ),
            "impact": "15–25% подобрение на продуктивността чрез системи за отчетност",
        },
        "financial": {
            "title": "Пропуски във финансовите операции",
            "description": _v(
                "Непоследователно ценообразуване, бавно фактуриране и лошо събиране на "
                "вземания директно влияят на паричния Ви поток и рентабилност. Бизнесите "
                "със стандартизирано ценообразуване и дигитално фактуриране в същия ден "
                "събират 30% по-бързо.",
                "Без детайлно проследяване на печалба/загуба и ROI по канали за "
                "маркетинг, не можете да вземате умни инвестиционни решения или да "
                "определите кои източници на клиенти са наистина печеливши.",
            ),
            "impact": "Подобрен паричен поток и 10–20% намаляване на несъбрани приходи",
        },
    },
}

# Category labels used inside Bulgarian text; English uses CategoryScore.label
BG_CATEGORY_LABELS = {
    "technology": "Технологии и софтуер",
    "leads": "Маркетинг и запитвания",
    "scheduling": _v("Планиране и диспечиране", "Управление на запитвания"),
    "communication": "Комуникация",
    "followUp": "Проследяване и задържане",
    "operations": "Операции и отчетност",
    "financial": "Финансови операции",
}


# =============================================================================
# QUICK WINS AND STRATEGIC RECOMMENDATIONS  (home services, real estate)
# =============================================================================

QUICK_WINS: Dict[str, Tuple[List[Dict[str, str]], List[Dict[str, str]]]] = {
    "en": (
        [
            {
                "title": "Set Up Missed Call Text-Back",
                "description": "Configure your CRM to automatically text every missed caller "
                               "within 60 seconds with a link to book online.",
                "timeframe": "Can be live in 24–48 hours",
            },
            {
                "title": "Activate Review Request Automation",
                "description": "Set up an automated text message requesting a Google review "
                               "immediately after every completed job. This alone can double "
                               "your review count within 90 days.",
                "timeframe": "Set up in 1–2 hours with most field service platforms",
            },
            {
                "title": "Create a Post-Job Follow-Up Sequence",
                "description": "Build a simple 3-message follow-up: (1) Thank you + review "
                               "request, (2) Maintenance tip related to the job, (3) Seasonal "
                               "service reminder. Set it to run automatically.",
                "timeframe": "1–2 days to create and activate",
            },
        ],
        [
            {
                "title": "Implement 5-Minute Lead Response SOP",
                "description": "Create a written standard operating procedure requiring all "
                               "internet leads to receive a call + text within 5 minutes. Use "
                               "round-robin automation in your CRM to enforce it.",
                "timeframe": "Can be implemented in 24 hours",
            },
            {
                "title": "Build a 30-Day Lead Nurture Sequence",
                "description": "Create a minimum 8-touch email + text drip sequence for all new "
                               "leads who don't immediately convert to appointments. Most CRMs "
                               "have this built in and unused.",
                "timeframe": "3–5 hours to set up in your existing CRM",
            },
            {
                "title": "Launch a Past Client Referral Campaign",
                "description": "Send a simple personal email to your last 2 years of closed "
                               "clients asking if they know anyone who needs help buying or "
                               "selling. Personal outreach converts at 20–30%.",
                "timeframe": "Can send today, takes 1 hour",
            },
        ],
    ),
    "bg": (
        [
            {
                "title": "Настройте автоматичен отговор на пропуснати обаждания",
                "description": "Конфигурирайте Вашия CRM да изпраща автоматичен SMS на всеки "
                               "пропуснат обаждащ се в рамките на 60 секунди с линк за онлайн "
                               "резервация.",
                "timeframe": "Може да е готово за 24–48 часа",
            },
            {
                "title": "Активирайте автоматизация за заявки за отзиви",
                "description": "Настройте автоматичен SMS с молба за Google отзив веднага след "
                               "всяка завършена задача. Само това може да удвои броя на "
                               "отзивите Ви в рамките на 90 дни.",
                "timeframe": "Настройва се за 1–2 часа с повечето платформи",
            },
            {
                "title": "Създайте последователност за проследяване след задача",
                "description": "Изградете проста 3-съобщения последователност: (1) Благодарност "
                               "+ заявка за отзив, (2) Съвет за поддръжка, свързан със задачата, "
                               "(3) Сезонно напомняне за услуга. Настройте го на автоматичен режим.",
                "timeframe": "1–2 дни за създаване и активиране",
            },
        ],
        [
            {
                "title": "Въведете стандарт за отговор до 5 минути",
                "description": "Създайте писмена процедура, изискваща всички интернет запитвания "
                               "да получат обаждане + SMS до 5 минути. Използвайте автоматизация "
                               "в CRM за разпределяне по ротация.",
                "timeframe": "Може да се приложи за 24 часа",
            },
            {
                "title": "Изградете 30-дневна последователност за проследяване",
                "description": "Създайте минимум 8-стъпкова имейл + SMS последователност за "
                               "всички нови запитвания, които не се конвертират веднага в срещи. "
                               "Повечето CRM системи имат тази функция вградена.",
                "timeframe": "3–5 часа за настройка в текущия Ви CRM",
            },
            {
                "title": "Стартирайте кампания за препоръки от минали клиенти",
                "description": "Изпратете личен имейл до клиентите Ви от последните 2 години с "
                               "въпрос дали познават някой, който има нужда от помощ при покупка "
                               "или продажба. Личните контакти конвертират с 20–30%.",
                "timeframe": "Може да се изпрати днес, отнема 1 час",
            },
        ],
    ),
}

STRATEGIC_RECOMMENDATIONS: Dict[str, Tuple[List[Dict[str, str]], List[Dict[str, str]]]] = {
    "en": (
        [
            {
                "title": "Implement an AI-Powered Answering & Booking System",
                "description": "Deploy an AI voice agent or chatbot that answers after-hours "
                               "calls, qualifies leads, and books jobs directly into your "
                               "scheduling software, 24/7, without staff.",
                "roi": "Estimated 15–25 additional booked jobs per month",
            },
            {
                "title": "Upgrade to a Full Field Service Management Platform",
                "description": "Migrate to an all-in-one platform that unifies scheduling, "
                               "dispatch, invoicing, customer communication, and reporting in "
                               "one place.",
                "roi": "10–20 hours/week saved, 15–30% revenue increase typical within 12 months",
            },
            {
                "title": "Launch a Membership/Maintenance Plan Program",
                "description": "Create recurring revenue with a seasonal maintenance plan. Even "
                               "with 50 members, that is predictable annual revenue plus "
                               "priority customers who refer.",
                "roi": "Significant new recurring revenue depending on your customer base size",
            },
        ],
        [
            {
                "title": "Deploy a Comprehensive CRM Follow-Up System",
                "description": "Implement automated long-term lead nurture sequences (6–18 "
                               "months) and a systematic past-client touchpoint plan. The "
                               "average buyer/seller transaction takes 6–18 months to close.",
                "roi": "30–50% more closings from your existing lead database",
            },
            {
                "title": "Build an AI-Powered Lead Qualification System",
                "description": "Implement AI chat or voice qualification on your website and "
                               "portals to engage leads instantly, qualify their timeline and "
                               "motivation, and route hot leads to agents immediately.",
                "roi": "3–5x improvement in internet lead conversion rates",
            },
            {
                "title": "Create Agent Performance Dashboards",
                "description": "Build weekly KPI dashboards showing each agent's leads, "
                               "contacts, appointments, and contracts. Data-driven coaching "
                               "sessions improve team productivity by 20–35%.",
                "roi": "15–30% increase in team GCI within 6 months",
            },
        ],
    ),
    "bg": (
        [
            {
                "title": "Внедрете AI система за отговори и резервации",
                "description": "Внедрете AI гласов агент или чатбот, който отговаря на обаждания "
                               "извън работно време, квалифицира запитвания и резервира задачи "
                               "директно в софтуера Ви за планиране, 24/7, без персонал.",
                "roi": "Очаквани 15–25 допълнително резервирани задачи на месец",
            },
            {
                "title": "Надградете до пълна платформа за управление на полеви услуги",
                "description": "Преминете към цялостна платформа, която обединява планиране, "
                               "диспечиране, фактуриране, комуникация с клиенти и отчетност на "
                               "едно място.",
                "roi": "10–20 часа/седмица спестени, 15–30% увеличение на приходите типично "
                       "в рамките на 12 месеца",
            },
            {
                "title": "Стартирайте програма за абонаменти/планове за поддръжка",
                "description": "Създайте рекурентен приход със сезонен план за поддръжка. Дори с "
                               "50 абоната, това е предвидим годишен приход, плюс приоритетни "
                               "клиенти, които препоръчват.",
                "roi": "Значителен нов рекурентен приход в зависимост от размера на "
                       "клиентската база",
            },
        ],
        [
            {
                "title": "Внедрете цялостна CRM система за проследяване",
                "description": "Приложете автоматизирани дългосрочни последователности за "
                               "проследяване (6–18 месеца) и систематичен план за контакт с "
                               "минали клиенти. Средната сделка за покупка/продажба отнема "
                               "6–18 месеца до приключване.",
                "roi": "30–50% повече сключени сделки от съществуващата Ви база данни",
            },
            {
                "title": "Изградете AI система за квалификация на запитвания",
                "description": "Внедрете AI чат или гласова квалификация на уебсайта и порталите "
                               "Ви, за да ангажирате запитвания мигновено, да квалифицирате "
                               "времевата им рамка и мотивация, и да насочите горещите клиенти "
                               "към агенти незабавно.",
                "roi": "3–5 пъти подобрение в конверсията на интернет запитвания",
            },
            {
                "title": "Създайте табла за представяне на агентите",
                "description": "Изградете седмични KPI табла, показващи запитванията, контактите, "
                               "срещите и договорите на всеки агент. Обучителните сесии, "
                               "базирани на данни, подобряват продуктивността на екипа с 20–35%.",
                "roi": "15–30% увеличение на GCI на екипа в рамките на 6 месеца",
            },
        ],
    ),
}

QUICK_WIN_PRIORITIES = ("high", "high", "medium")
STRATEGIC_PRIORITIES = ("high", "medium", "medium")


# =============================================================================
# LOCALISED COPY
# =============================================================================

CTAS = {
    "en": {
        "gap": "Book a free strategy call to close this gap",
        "quick_win": "Let us set this up for you this week",
        "strategic": "Schedule a planning session for this rollout",
    },
    "bg": {
        "gap": "Запазете безплатна консултация, за да затворите този пропуск",
        "quick_win": "Нека го настроим за Вас тази седмица",
        "strategic": "Запазете среща за планиране на внедряването",
    },
}

BENCHMARK_PHRASES = {
    "en": {
        "above": "above the industry average",
        "average": "in line with the industry average",
        "below": "below the industry average",
    },
    "bg": {
        "above": "над средното за бранша",
        "average": "на нивото на средното за бранша",
        "below": "под средното за бранша",
    },
}

AUDIENCE = {
    "en": _v("home service businesses", "real estate teams"),
    "bg": _v("бизнеси за домашни услуги", "екипи за недвижими имоти"),
}


def _pick(value, is_home_services: bool) -> str:
    if isinstance(value, tuple):
        return value[0] if is_home_services else value[1]
    return value


def _benchmark(score: int) -> str:
    if score >= 65:
        return "above"
    if score >= 40:
        return "average"
    return "below"


def _priority_for(score: int) -> str:
    if score < 40:
        return "high"
    if score < 65:
        return "medium"
    return "low"


# =============================================================================
# GENERATOR
# =============================================================================

class TemplateReportGenerator:
    """
    Builds template reports for one language.

    Stateless apart from the language; every call returns fresh items.
    """

    def __init__(self, language: str = "en"):
        if language not in GAP_NARRATIVES:
            logger.debug(f"No template narratives for {language!r}, using English")
            language = "en"
        self.language = language

    def generate(self, scores: AuditScores, submission: AuditSubmission) -> AIReportData:
        hs = submission.is_home_services
        business = submission.business_name or DEFAULT_BUSINESS_NAME[self.language]
        weakest = scores.weakest(GAP_COUNT)

        return AIReportData(
            executive_summary=self._summary(scores, business, weakest, hs),
            gaps=[self._gap(cat, hs) for cat in weakest],
            quick_wins=self._fixed_items(QUICK_WINS, QUICK_WIN_PRIORITIES, "quick_win", hs),
            strategic_recommendations=self._fixed_items(
                STRATEGIC_RECOMMENDATIONS, STRATEGIC_PRIORITIES, "strategic", hs,
            ),
            source=SOURCE_TEMPLATE,
        )

    def label(self, category: CategoryScore, is_home_services: bool) -> str:
        if self.language == "bg":
            return _pick(BG_CATEGORY_LABELS.get(category.category, category.label), is_home_services)
        return category.label

    def _gap(self, category: CategoryScore, hs: bool) -> ReportItem:
        narrative = GAP_NARRATIVES[self.language].get(category.category)
        if narrative is None:
            return self._generic_gap(category, hs)
        return ReportItem(
            title=_pick(narrative["title"], hs),
            description=_pick(narrative["description"], hs),
            impact=_pick(narrative["impact"], hs),
            priority=_priority_for(category.score),
            cta=CTAS[self.language]["gap"],
        )

    def _generic_gap(self, category: CategoryScore, hs: bool) -> ReportItem:
        label = self.label(category, hs)
        if self.language == "bg":
            title = f"{label}: необходимо подобрение"
            description = (
                f"Вашият резултат от {category.score}% в {label.lower()} показва значителен "
                "потенциал за подобрение с правилните системи и процеси."
            )
            impact = "Значителни подобрения в ефективността и приходите са възможни"
        else:
            title = f"{label} Improvement Needed"
            description = (
                f"Your {label.lower()} score of {category.score}% indicates significant room "
                "for improvement with the right systems and processes."
            )
            impact = "Significant efficiency and revenue gains available"
        return ReportItem(
            title=title,
            description=description,
            impact=impact,
            priority=_priority_for(category.score),
            cta=CTAS[self.language]["gap"],
        )

    def _fixed_items(self, source, priorities, cta_key: str, hs: bool) -> List[ReportItem]:
        entries = _pick(source[self.language], hs)
        return [
            ReportItem(
                priority=priority,
                cta=CTAS[self.language][cta_key],
                **entry,
            )
            for entry, priority in zip(entries, priorities)
        ]

    def _summary(
        self,
        scores: AuditScores,
        business: str,
        weakest: List[CategoryScore],
        hs: bool,
    ) -> str:
        strongest = scores.strongest()
        phrase = BENCHMARK_PHRASES[self.language][_benchmark(scores.overall)]
        audience = _pick(AUDIENCE[self.language], hs)
        focus = [self.label(c, hs) for c in weakest[:2]]

        if self.language == "bg":
            return (
                f"{business} постигна общ резултат {scores.overall}/100, {phrase} за "
                f"{audience}. Най-силната Ви област е {self.label(strongest, hs)} "
                f"({strongest.score}/100), а най-големите възможности са в "
                f"{' и '.join(focus)}. Препоръките по-долу започват с тези пропуски."
            )
        return (
            f"{business} scored {scores.overall}/100 overall, {phrase} for {audience}. "
            f"Your strongest area is {self.label(strongest, hs)} ({strongest.score}/100), "
            f"while the biggest opportunities are in {' and '.join(focus)}. The "
            f"recommendations below start with those gaps."
        )


def generate_template_report(
    scores: AuditScores,
    submission: AuditSubmission,
    language: Optional[str] = None,
) -> AIReportData:
    """Template report in the submission's language unless one is given."""
    return TemplateReportGenerator(language or submission.language).generate(scores, submission)
