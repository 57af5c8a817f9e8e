import asyncio

from loguru import logger

from flowstate import create_machine, configure_logging, EnterEvent, ExitEvent


async def run() -> None:
    """入口函数，演示一个带异步动作的播放器状态机"""
    configure_logging()

    async def load(meta: dict[str, str] | None) -> str:
        # 模拟异步加载资源
        await asyncio.sleep(0.1)
        return "ready" if meta and meta.get("url") else "failed"

    player = create_machine(
        {
            "idle": {"load": load},
            "ready": {"play": lambda: "playing"},
            "playing": {"pause": lambda: "paused", "stop": lambda: "idle"},
            "paused": {"play": lambda: "playing", "stop": lambda: "idle"},
            "failed": {},
        },
        initial_state="idle",
    )
    logger.info(f"Player created, actions: {list(player.actions)}")

    def on_exit(event: ExitEvent) -> None:
        logger.info(f"Leaving {event.current} via {event.action}")

    def on_enter(event: EnterEvent) -> None:
        logger.info(f"Entered {event.current} from {event.last}")

    player.on_exit(on_exit)
    unsubscribe_enter = player.on_enter(on_enter)
    player.onPlaying(lambda event: logger.info("Playback started"))

    await player.load({"url": "https://example.com/track.mp3"})
    await player.play()
    await player.pause()
    # paused 状态下不支持 pause，返回 None
    result = await player.pause()
    logger.info(f"Second pause result: {result}, state: {player.get_state()}")

    unsubscribe_enter()
    await player.stop()
    logger.info(f"Final state: {player.get_state()}")


if __name__ == "__main__":
    asyncio.run(run())
